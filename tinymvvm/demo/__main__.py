import sys

from tinymvvm.core.application import Application
from tinymvvm.core.config import ConfigManager
from tinymvvm.core.logging import setup_logging
from tinymvvm.demo.bootstrapper import DemoBootstrapper


def main(argv=None) -> int:
    argv = list(sys.argv if argv is None else argv)
    config = ConfigManager(argv[1] if len(argv) > 1 else None)

    general = config.data.general
    setup_logging(debug_mode=general.debug_mode, log_dir=general.log_dir)

    app = Application(argv, config)
    DemoBootstrapper(app)
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
