"""
MVVM Package - WPF-Style Data Binding for PySide6.

Provides:
- PropertyChangedBase: propertyChanged(name) notification plumbing.
- BindableProperty: Descriptor for auto-signaling properties.
- ViewModelBase / DialogViewModel: Base ViewModels with activation hooks.
- RelayCommand / AsyncCommand: Commands with can-execute state.
- bind() / bind_command(): Declarative binding between ViewModel and View.
"""
from tinymvvm.ui.mvvm.bindable import BindableProperty, PropertyChangedBase
from tinymvvm.ui.mvvm.viewmodel import ViewModelBase, DialogViewModel
from tinymvvm.ui.mvvm.commands import RelayCommand, AsyncCommand
from tinymvvm.ui.mvvm.binding import bind, bind_command, BindingMode

__all__ = [
    # ViewModels
    "PropertyChangedBase",
    "BindableProperty",
    "ViewModelBase",
    "DialogViewModel",

    # Commands
    "RelayCommand",
    "AsyncCommand",

    # Binding
    "bind",
    "bind_command",
    "BindingMode",
]
