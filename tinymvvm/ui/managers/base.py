from typing import Any, Set, Tuple, Type, TypeVar
from PySide6.QtWidgets import QWidget

from tinymvvm.core.config import ConfigManager
from tinymvvm.core.container import Container
from tinymvvm.core.logging import get_class_logger
from tinymvvm.ui.views import ViewRegistry

T = TypeVar('T')


class ViewPresenter:
    """
    Shared plumbing for the window, dialog and flyout managers: resolving
    ViewModels, creating their views and keeping shown views alive.
    """

    def __init__(self, container: Container, views: ViewRegistry, config: ConfigManager):
        self._container = container
        self._views = views
        self._config = config
        self._open: Set[QWidget] = set()
        self.log = get_class_logger(self)

    def resolve_view_model(self, view_model_cls: Type[T]) -> T:
        """Resolve from the container when registered, else construct with injection."""
        if self._container.is_registered(view_model_cls):
            return self._container.resolve(view_model_cls)
        return self._container.create(view_model_cls)

    def create_view(self, view_model_cls: type) -> Tuple[Any, QWidget]:
        view_model = self.resolve_view_model(view_model_cls)
        return view_model, self._views.create_view(view_model)

    def track(self, view_model: Any, view: QWidget) -> None:
        """
        Keep `view` referenced while it is open and drive the ViewModel's
        activate/deactivate hooks from the view's lifetime.
        """
        self._open.add(view)

        def on_destroyed(*_):
            self._open.discard(view)
            if hasattr(view_model, "deactivate"):
                view_model.deactivate()

        view.destroyed.connect(on_destroyed)
        if hasattr(view_model, "activate"):
            view_model.activate()

    @property
    def open_views(self) -> Set[QWidget]:
        return set(self._open)
