"""
WPF-Style Data Binding Utilities.

Provides declarative binding between ViewModel properties and View widgets.

Usage:
    from tinymvvm.ui.mvvm.binding import bind, BindingMode

    # One-way binding (VM -> View)
    bind(vm, "status", label, "text")

    # Two-way binding (VM <-> View)
    bind(vm, "text", line_edit, "text", mode=BindingMode.TWO_WAY)

    # Command binding, keeps the button enabled state in sync
    bind_command(vm.save, save_button)
"""
from enum import Enum
from typing import Any, Optional, Callable
from PySide6.QtCore import QObject
from PySide6.QtWidgets import QAbstractButton, QLineEdit, QLabel, QCheckBox, QSpinBox, QComboBox, QSlider

from tinymvvm.core.events import CompositeSubscription, Subscription
from tinymvvm.ui.mvvm.bindable import PropertyChangedBase
from tinymvvm.ui.mvvm.commands import RelayCommand


class BindingMode(Enum):
    """Binding direction modes, inspired by WPF."""
    ONE_WAY = "OneWay"           # Source -> Target (ViewModel -> View)
    TWO_WAY = "TwoWay"           # Source <-> Target (bidirectional)
    ONE_WAY_TO_SOURCE = "OneWayToSource"  # Target -> Source (View -> ViewModel)
    ONE_TIME = "OneTime"         # Initial sync only


# Widget property mappings for common Qt widgets
_WIDGET_PROPERTY_MAP = {
    QLineEdit: {"text": ("text", "textChanged")},
    QLabel: {"text": ("text", None)},
    QCheckBox: {"checked": ("isChecked", "toggled")},
    QSpinBox: {"value": ("value", "valueChanged")},
    QSlider: {"value": ("value", "valueChanged")},
    QComboBox: {"currentIndex": ("currentIndex", "currentIndexChanged")},
}


def _get_widget_accessors(widget: QObject, prop_name: str) -> tuple:
    """
    Get getter/setter/signal for a widget property.

    Returns:
        (getter_callable, setter_callable, change_signal_or_None)
    """
    for wtype, props in _WIDGET_PROPERTY_MAP.items():
        if isinstance(widget, wtype) and prop_name in props:
            getter_name, signal_name = props[prop_name]
            getter = getattr(widget, getter_name)
            setter = getattr(widget, f"set{prop_name[0].upper()}{prop_name[1:]}")
            signal = getattr(widget, signal_name) if signal_name else None
            return (getter, setter, signal)

    # Fallback: Qt accessor pair (value()/setValue()), else plain attribute access
    getter = getattr(widget, prop_name, None)
    if not callable(getter):
        getter = lambda w=widget, p=prop_name: getattr(w, p, None)
    setter = getattr(widget, f"set{prop_name[0].upper()}{prop_name[1:]}", None)
    if setter is None:
        setter = lambda v, w=widget, p=prop_name: setattr(w, p, v)
    signal = getattr(widget, f"{prop_name}Changed", None)

    return (getter, setter, signal)


def bind(
    source: PropertyChangedBase,
    source_property: str,
    target: QObject,
    target_property: str,
    mode: BindingMode = BindingMode.ONE_WAY,
    converter: Optional[Callable[[Any], Any]] = None,
    converter_back: Optional[Callable[[Any], Any]] = None
) -> Subscription:
    """
    Bind a ViewModel property to a View widget property.

    Args:
        source: ViewModel instance.
        source_property: Property name on ViewModel (e.g., "status").
        target: QWidget instance.
        target_property: Property name on Widget (e.g., "text").
        mode: Binding direction mode.
        converter: Optional function to convert source value to target value.
        converter_back: Optional function to convert target value back to source.

    Returns:
        Subscription that disconnects the binding.
    """
    target_getter, target_setter, target_signal = _get_widget_accessors(target, target_property)
    subscription = CompositeSubscription(f"bind:{source_property}")

    # Prevents ping-pong in two-way bindings
    updating = [False]

    def update_target():
        if updating[0]:
            return
        updating[0] = True
        try:
            value = getattr(source, source_property, None)
            if converter:
                value = converter(value)
            target_setter(value)
        finally:
            updating[0] = False

    if mode in (BindingMode.ONE_WAY, BindingMode.TWO_WAY, BindingMode.ONE_TIME):
        update_target()

        if mode != BindingMode.ONE_TIME:
            def on_property_changed(name: str):
                if name in (source_property, ""):
                    update_target()

            source.propertyChanged.connect(on_property_changed)
            subscription.add(Subscription(
                lambda: source.propertyChanged.disconnect(on_property_changed)))

    if mode in (BindingMode.TWO_WAY, BindingMode.ONE_WAY_TO_SOURCE) and target_signal is not None:
        def update_source(*args):
            if updating[0]:
                return
            updating[0] = True
            try:
                value = target_getter()
                if converter_back:
                    value = converter_back(value)
                setattr(source, source_property, value)
            finally:
                updating[0] = False

        target_signal.connect(update_source)
        subscription.add(Subscription(lambda: target_signal.disconnect(update_source)))

    return subscription


def bind_command(command: RelayCommand, trigger: QAbstractButton, *args: Any) -> Subscription:
    """
    Run `command` when `trigger` is clicked and mirror can_execute() into
    the button's enabled state.
    """
    def on_clicked(*_):
        command.execute(*args)

    def sync_enabled():
        trigger.setEnabled(command.can_execute())

    sync_enabled()
    trigger.clicked.connect(on_clicked)
    command.canExecuteChanged.connect(sync_enabled)

    subscription = CompositeSubscription("bind_command")
    subscription.add(Subscription(lambda: trigger.clicked.disconnect(on_clicked)))
    subscription.add(Subscription(lambda: command.canExecuteChanged.disconnect(sync_enabled)))
    return subscription
