"""
View Registry - Maps ViewModel types to view factories.

Managers look views up here when asked to show a ViewModel type.

Usage:
    views = ViewRegistry()

    @views.view(MainViewModel)
    class MainWindow(QMainWindow):
        def __init__(self, vm: MainViewModel):
            ...

    views.register(SettingsViewModel, lambda vm: SettingsDialog(vm))
    widget = views.create_view(vm)
"""
from typing import Any, Callable, Dict, Optional, Type, TypeVar
from PySide6.QtWidgets import QWidget
from loguru import logger

V = TypeVar('V')

ViewFactory = Callable[[Any], QWidget]


class ViewNotFoundError(LookupError):
    """No view registered for a ViewModel type (or any of its bases)."""
    pass


class ViewRegistry:
    """
    Maps ViewModel classes to view factories.

    Lookup walks the ViewModel's MRO, so a view registered for a base
    ViewModel also serves its subclasses.
    """

    def __init__(self):
        self._factories: Dict[type, ViewFactory] = {}

    def register(self, view_model_cls: type, view_factory: ViewFactory) -> None:
        """
        Register a view factory.

        Args:
            view_model_cls: ViewModel class
            view_factory: Callable receiving the ViewModel instance and returning a QWidget
        """
        self._factories[view_model_cls] = view_factory
        logger.debug(f"Registered view for {view_model_cls.__name__}")

    def view(self, view_model_cls: type) -> Callable[[Type[V]], Type[V]]:
        """Class decorator form of register()."""
        def decorator(view_cls: Type[V]) -> Type[V]:
            self.register(view_model_cls, view_cls)
            return view_cls
        return decorator

    def factory_for(self, view_model_cls: type) -> Optional[ViewFactory]:
        for cls in view_model_cls.__mro__:
            factory = self._factories.get(cls)
            if factory is not None:
                return factory
        return None

    def is_registered(self, view_model_cls: type) -> bool:
        return self.factory_for(view_model_cls) is not None

    def create_view(self, view_model: Any) -> QWidget:
        """
        Create the view for a ViewModel instance and attach the ViewModel as
        its `data_context`.

        Raises:
            ViewNotFoundError: no view registered for the ViewModel type
        """
        factory = self.factory_for(type(view_model))
        if factory is None:
            raise ViewNotFoundError(f"No view registered for {type(view_model).__name__}")
        view = factory(view_model)
        view.data_context = view_model
        return view
