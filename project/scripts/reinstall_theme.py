"""Register (or re-register) the AI Interview question theme from the command line."""
import json
import sys

from config import settings
from services.theme_registry import registry_from_config


def main() -> None:
    registry = registry_from_config(vars(settings))
    if "--uninstall" in sys.argv[1:]:
        removed = registry.uninstall()
        print("Theme unregistered." if removed else "Theme was not registered.")
        return
    if "--debug" in sys.argv[1:]:
        print(json.dumps(registry.diagnostics(), indent=2))
        return

    report = registry.reinstall_report()
    print(report["message"])
    print(f"xml_path: {report['xml_path']}")


if __name__ == "__main__":
    main()
