from tinymvvm.core.bootstrapper import Bootstrapper
from tinymvvm.core.container import ContainerBuilder
from tinymvvm.demo.viewmodels import (MainViewModel, SampleDialogViewModel,
                                      SampleFlyoutViewModel, SampleSubViewModel)
from tinymvvm.demo.views import MainWindow, SampleDialog, SampleFlyoutView
from tinymvvm.ui.views import ViewRegistry


class DemoBootstrapper(Bootstrapper):
    main_view_model = MainViewModel

    def configure_container(self, builder: ContainerBuilder) -> None:
        super().configure_container(builder)
        builder.register_type(SampleSubViewModel).as_self().single_instance()

    def configure_views(self, views: ViewRegistry) -> None:
        views.register(MainViewModel, MainWindow)
        views.register(SampleDialogViewModel, SampleDialog)
        views.register(SampleFlyoutViewModel, SampleFlyoutView)
