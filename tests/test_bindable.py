"""
Unit Tests for property change notification.

Tests for:
- PropertyChangedBase.set_property
- BindableProperty descriptor
- ViewModelBase / DialogViewModel
"""
from unittest.mock import MagicMock
from PySide6.QtCore import Signal

from tinymvvm.ui.mvvm import BindableProperty, DialogViewModel, PropertyChangedBase, ViewModelBase


class ExplicitVM(PropertyChangedBase):
    def __init__(self):
        super().__init__()
        self._title = ""

    @property
    def title(self):
        return self._title

    @title.setter
    def title(self, value):
        self.set_property("title", value)


class DescriptorVM(PropertyChangedBase):
    countChanged = Signal(int)
    count = BindableProperty(default=0)
    name = BindableProperty(default="", coerce=str.strip)


# =============================================================================
# set_property
# =============================================================================

class TestSetProperty:
    def test_new_value_notifies_once(self, qapp):
        vm = ExplicitVM()
        callback = MagicMock()
        vm.propertyChanged.connect(callback)

        vm.title = "Hello"

        callback.assert_called_once_with("title")
        assert vm.title == "Hello"

    def test_same_value_does_not_notify(self, qapp):
        """Assigning the current value is a no-op."""
        vm = ExplicitVM()
        vm.title = "Hello"
        callback = MagicMock()
        vm.propertyChanged.connect(callback)

        vm.title = "Hello"

        callback.assert_not_called()

    def test_returns_whether_changed(self, qapp):
        vm = ExplicitVM()
        assert vm.set_property("title", "a") is True
        assert vm.set_property("title", "a") is False

    def test_custom_backing_field(self, qapp):
        vm = ExplicitVM()
        vm.set_property("title", "x", attr_name="_other")
        assert vm._other == "x"
        assert vm.title == ""

    def test_notify_all_uses_empty_name(self, qapp):
        vm = ExplicitVM()
        callback = MagicMock()
        vm.propertyChanged.connect(callback)

        vm.notify_all()

        callback.assert_called_once_with("")


# =============================================================================
# BindableProperty
# =============================================================================

class TestBindableProperty:
    def test_default_value(self, qapp):
        assert DescriptorVM().count == 0

    def test_emits_generic_and_specific_signal(self, qapp):
        vm = DescriptorVM()
        generic = MagicMock()
        specific = MagicMock()
        vm.propertyChanged.connect(generic)
        vm.countChanged.connect(specific)

        vm.count = 5

        generic.assert_called_once_with("count")
        specific.assert_called_once_with(5)

    def test_no_emit_on_same_value(self, qapp):
        vm = DescriptorVM()
        vm.count = 5
        callback = MagicMock()
        vm.propertyChanged.connect(callback)

        vm.count = 5

        callback.assert_not_called()

    def test_coerce_applied_before_compare(self, qapp):
        vm = DescriptorVM()
        vm.name = "bob"
        callback = MagicMock()
        vm.propertyChanged.connect(callback)

        vm.name = "  bob  "

        assert vm.name == "bob"
        callback.assert_not_called()

    def test_values_are_per_instance(self, qapp):
        first, second = DescriptorVM(), DescriptorVM()
        first.count = 3
        assert second.count == 0

    def test_class_access_returns_descriptor(self):
        assert isinstance(DescriptorVM.count, BindableProperty)


# =============================================================================
# ViewModels
# =============================================================================

class TestViewModelBase:
    def test_display_name_defaults_to_class_name(self, qapp):
        assert ViewModelBase().display_name == "ViewModelBase"

    def test_display_name_notifies(self, qapp):
        vm = ViewModelBase()
        callback = MagicMock()
        vm.propertyChanged.connect(callback)

        vm.display_name = "Main"

        callback.assert_called_once_with("display_name")

    def test_activation_hooks_run_once(self, qapp):
        class Tracking(ViewModelBase):
            def __init__(self):
                super().__init__()
                self.events = []

            def on_activated(self):
                self.events.append("activated")

            def on_deactivated(self):
                self.events.append("deactivated")

        vm = Tracking()
        vm.activate()
        vm.activate()
        vm.deactivate()
        vm.deactivate()

        assert vm.events == ["activated", "deactivated"]
        assert not vm.is_active

    def test_dialog_close_emits_result(self, qapp):
        vm = DialogViewModel()
        callback = MagicMock()
        vm.closeRequested.connect(callback)

        vm.close("done")

        callback.assert_called_once_with("done")
