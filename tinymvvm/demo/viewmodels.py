import asyncio
import time
from PySide6.QtCore import Signal
from loguru import logger

from tinymvvm.core.dispatcher import IUiExecution
from tinymvvm.ui.managers import IDialogManager, IFlyoutManager
from tinymvvm.ui.mvvm import (AsyncCommand, BindableProperty, DialogViewModel,
                              PropertyChangedBase, RelayCommand, ViewModelBase)


class SampleSubViewModel(PropertyChangedBase):
    def __init__(self):
        super().__init__()
        self._text = ""

    @property
    def text(self):
        return self._text

    @text.setter
    def text(self, value):
        if self._text != value:
            self._text = value
            self.notify_of_property_change("text")


class SampleDialogViewModel(DialogViewModel):
    name = BindableProperty(default="")

    def __init__(self):
        super().__init__()
        self.display_name = "Enter a name"
        self.confirm = RelayCommand(lambda: self.close(self.name), lambda: bool(self.name))
        self.cancel = RelayCommand(lambda: self.close(None))
        self.propertyChanged.connect(self._on_property_changed)

    def _on_property_changed(self, name: str):
        if name == "name":
            self.confirm.raise_can_execute_changed()


class SampleFlyoutViewModel(DialogViewModel):
    note = BindableProperty(default="")

    def __init__(self):
        super().__init__()
        self.display_name = "Notes"
        self.apply = RelayCommand(lambda: self.close(self.note))


class MainViewModel(ViewModelBase):
    """
    Main window state: a status line, a nested sub-view-model and commands
    for each kind of UI surface the managers provide.
    """

    statusChanged = Signal(str)
    status = BindableProperty(default="Ready")
    progress = BindableProperty(default=0)

    def __init__(self, ui: IUiExecution, dialogs: IDialogManager, flyouts: IFlyoutManager,
                 sub: SampleSubViewModel):
        super().__init__()
        self.display_name = "TinyMvvm Demo"
        self._ui = ui
        self._dialogs = dialogs
        self._flyouts = flyouts
        self.sub = sub

        self.open_dialog = AsyncCommand(self._open_dialog)
        self.open_flyout = AsyncCommand(self._open_flyout)
        self.run_background = AsyncCommand(self._run_background)
        self.about = RelayCommand(self._about)

    async def _open_dialog(self):
        name = await asyncio.wrap_future(self._dialogs.show_dialog_async(SampleDialogViewModel))
        self.status = f"Hello, {name}!" if isinstance(name, str) and name else "Dialog cancelled"

    async def _open_flyout(self):
        note = await asyncio.wrap_future(self._flyouts.show_flyout(SampleFlyoutViewModel))
        if note:
            self.sub.text = note
        self.status = "Flyout closed"

    async def _run_background(self):
        self.status = "Working..."
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._work, 5)
        self.status = "Background work done"

    def _work(self, steps: int):
        # Runs on a worker thread; property changes go through the UI thread
        for step in range(1, steps + 1):
            time.sleep(0.2)
            self._ui.execute(lambda step=step: setattr(self, "progress", step * 100 // steps))
        logger.debug(f"Background work finished after {steps} steps")

    def _about(self):
        self._dialogs.show_message_box("About", "TinyMvvm demo application")
