"""
WPF-Style property change notification.

Provides automatic signal emission on property change, reducing MVVM boilerplate.

Usage:
    class MyViewModel(PropertyChangedBase):
        username = BindableProperty(default="")
        age = BindableProperty(default=0)

    # Changing the property emits propertyChanged("username")
    vm.username = "Alice"

Or, for explicit properties:

    @property
    def text(self):
        return self._text

    @text.setter
    def text(self, value):
        self.set_property("text", value)
"""
from typing import Any, Optional, Callable, TypeVar, Generic
from PySide6.QtCore import QObject, Signal

T = TypeVar('T')

_MISSING = object()


class PropertyChangedBase(QObject):
    """
    Base class for objects with WPF-style property change notification.

    `propertyChanged` carries the name of the changed property; an empty
    name means every property may have changed.
    """

    propertyChanged = Signal(str)

    def notify_of_property_change(self, property_name: str) -> None:
        """Emit a property changed notification for `property_name`."""
        self.propertyChanged.emit(property_name)

    def notify_all(self) -> None:
        """Tell bound views to refresh everything."""
        self.propertyChanged.emit("")

    def set_property(self, property_name: str, value: Any, attr_name: Optional[str] = None) -> bool:
        """
        Store `value` in the backing field (`_<property_name>` by default) and
        notify when it differs from the current value.

        Returns:
            True if the value changed
        """
        attr_name = attr_name or f"_{property_name}"
        if getattr(self, attr_name, _MISSING) == value:
            return False
        setattr(self, attr_name, value)
        self.notify_of_property_change(property_name)
        return True


class BindableProperty(Generic[T]):
    """
    Descriptor that emits a signal when the property value changes.

    Inspired by WPF's DependencyProperty / INotifyPropertyChanged pattern.

    Args:
        default: Default value for the property.
        signal_name: Optional custom signal name. Defaults to "{property_name}Changed".
        coerce: Optional callable to coerce/validate the value before setting.

    Example:
        class UserViewModel(PropertyChangedBase):
            nameChanged = Signal(str)
            name = BindableProperty(default="")
            age = BindableProperty(default=0, coerce=lambda x: max(0, int(x)))
    """

    def __init__(
        self,
        default: T = None,
        signal_name: Optional[str] = None,
        coerce: Optional[Callable[[Any], T]] = None
    ):
        self.default = default
        self._signal_name = signal_name
        self.coerce = coerce
        self._attr_name: str = ""
        self._public_name: str = ""

    def __set_name__(self, owner: type, name: str) -> None:
        """Called when the descriptor is assigned to a class attribute."""
        self._public_name = name
        self._attr_name = f"_bindable_{name}"

        if not self._signal_name:
            self._signal_name = f"{name}Changed"

        # Qt signals cannot be added to a QObject class after creation;
        # define "<name>Changed" on the class to get a typed signal as well.

    def __get__(self, obj: Optional[QObject], objtype: type = None) -> T:
        """Get the property value."""
        if obj is None:
            return self  # type: ignore
        return getattr(obj, self._attr_name, self.default)

    def __set__(self, obj: QObject, value: Any) -> None:
        """Set the property value and emit change signal if different."""
        if self.coerce is not None:
            value = self.coerce(value)

        old_value = getattr(obj, self._attr_name, self.default)

        if old_value != value:
            setattr(obj, self._attr_name, value)

            specific_signal = getattr(obj, self._signal_name, None)
            if specific_signal is not None and callable(getattr(specific_signal, 'emit', None)):
                specific_signal.emit(value)

            if isinstance(obj, PropertyChangedBase):
                obj.notify_of_property_change(self._public_name)
