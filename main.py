# Main.py
""""" Entry point for the stack calculator.

   Responsibilities:
   - Detect run mode (script vs PyInstaller.exe)
   - Verify required files exist in development mode
   - Load configuration and start the Qt GUI, or the console with --console

"""""
import sys
from pathlib import Path
from stackcalc import config_manager as config_manager, MathEngine as MathEngine


# Resolve project root depending on run mode (Script or .exe)

if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent



def check_files_exist():

    """
      Fail fast in development if required files are missing / moved / renamed.
      In production (.exe) the files are embedded by the bundler and this check is skipped.
    """

    package_dir = PROJECT_ROOT / "stackcalc"

    REQUIRED = [
        package_dir / "UI.py",
        package_dir / "Console.py",
        package_dir / "MathEngine.py",
        package_dir / "ScientificEngine.py",
        package_dir / "config_manager.py",
        package_dir / "history_manager.py",
        package_dir / "error.py",
        package_dir / "config.json",
        package_dir / "ui_strings.json",
    ]

    missing_files = []
    for file_path in REQUIRED:
        if not file_path.exists():
            missing_files.append(file_path.name)

    if missing_files:
        print("Error: The following files are missing or in the wrong location:")
        for file_name in missing_files:
            print(f"- {file_name}")
        sys.exit(1)


def main(argv=None):

    """
    Load configuration and start the selected front end.
    - Keep this thin: no business logic here.
    """

    if argv is None:
        argv = sys.argv[1:]

    all_settings = config_manager.load_setting_value("all")
    MathEngine.debug = all_settings["debug"]
    if MathEngine.debug == True:
        print("Config loaded:", all_settings)

    if "--console" in argv:
        from stackcalc import Console
        Console.main(all_settings["history_size"])
    else:
        # Delegate control to the UI layer; the UI owns the event loop.
        from stackcalc import UI
        UI.main()


if __name__ == "__main__":
    is_running_as_exe = getattr(sys, 'frozen', False)

    if not is_running_as_exe:
        print("Developer Mode: Checking file paths...")
        check_files_exist()
    else:
        print("Production mode (.exe) is starting...")
    main()
