from PySide6.QtWidgets import (QDialog, QHBoxLayout, QLabel, QLineEdit, QMainWindow,
                               QProgressBar, QPushButton, QVBoxLayout, QWidget)

from tinymvvm.core.events import CompositeSubscription
from tinymvvm.ui.mvvm import BindingMode, bind, bind_command
from tinymvvm.demo.viewmodels import MainViewModel, SampleDialogViewModel, SampleFlyoutViewModel


class MainWindow(QMainWindow):
    def __init__(self, vm: MainViewModel):
        super().__init__()
        self.vm = vm
        self.bindings = CompositeSubscription("MainWindow")

        central = QWidget()
        layout = QVBoxLayout(central)

        self.text_edit = QLineEdit()
        self.text_edit.setPlaceholderText("Type something...")
        self.echo_label = QLabel()
        layout.addWidget(self.text_edit)
        layout.addWidget(self.echo_label)

        buttons = QHBoxLayout()
        self.dialog_button = QPushButton("Dialog...")
        self.flyout_button = QPushButton("Flyout")
        self.work_button = QPushButton("Background work")
        self.about_button = QPushButton("About")
        for button in (self.dialog_button, self.flyout_button, self.work_button, self.about_button):
            buttons.addWidget(button)
        layout.addLayout(buttons)

        self.progress_bar = QProgressBar()
        layout.addWidget(self.progress_bar)
        self.setCentralWidget(central)
        self.status_label = QLabel()
        self.statusBar().addWidget(self.status_label)

        self.bindings.add(bind(vm.sub, "text", self.text_edit, "text", mode=BindingMode.TWO_WAY))
        self.bindings.add(bind(vm.sub, "text", self.echo_label, "text"))
        self.bindings.add(bind(vm, "status", self.status_label, "text"))
        self.bindings.add(bind(vm, "progress", self.progress_bar, "value"))
        self.bindings.add(bind_command(vm.open_dialog, self.dialog_button))
        self.bindings.add(bind_command(vm.open_flyout, self.flyout_button))
        self.bindings.add(bind_command(vm.run_background, self.work_button))
        self.bindings.add(bind_command(vm.about, self.about_button))

    def closeEvent(self, event):
        self.bindings.dispose()
        super().closeEvent(event)


class SampleDialog(QDialog):
    def __init__(self, vm: SampleDialogViewModel):
        super().__init__()
        self.vm = vm
        layout = QVBoxLayout(self)
        self.name_edit = QLineEdit()
        layout.addWidget(QLabel("Name:"))
        layout.addWidget(self.name_edit)

        buttons = QHBoxLayout()
        buttons.addStretch()
        self.ok_button = QPushButton("OK")
        self.cancel_button = QPushButton("Cancel")
        buttons.addWidget(self.ok_button)
        buttons.addWidget(self.cancel_button)
        layout.addLayout(buttons)

        self.bindings = CompositeSubscription("SampleDialog")
        self.bindings.add(bind(vm, "name", self.name_edit, "text", mode=BindingMode.TWO_WAY))
        self.bindings.add(bind_command(vm.confirm, self.ok_button))
        self.bindings.add(bind_command(vm.cancel, self.cancel_button))
        self.finished.connect(lambda _code: self.bindings.dispose())


class SampleFlyoutView(QWidget):
    def __init__(self, vm: SampleFlyoutViewModel):
        super().__init__()
        self.vm = vm
        layout = QVBoxLayout(self)
        self.note_edit = QLineEdit()
        self.apply_button = QPushButton("Apply")
        layout.addWidget(self.note_edit)
        layout.addWidget(self.apply_button)
        layout.addStretch()

        self.bindings = CompositeSubscription("SampleFlyoutView")
        self.bindings.add(bind(vm, "note", self.note_edit, "text", mode=BindingMode.TWO_WAY))
        self.bindings.add(bind_command(vm.apply, self.apply_button))
