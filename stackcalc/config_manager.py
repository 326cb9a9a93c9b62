# config_manager.py
import json
from pathlib import Path

config_json = Path(__file__).resolve().parent / "config.json"
ui_strings = Path(__file__).resolve().parent / "ui_strings.json"


# Used whenever config.json is missing, unreadable or lacks a key
DEFAULT_SETTINGS = {
    "darkmode": False,
    "show_equation": True,
    "after_paste_enter": False,
    "decimal_places": 10,
    "history_size": 5,
    "debug": False
}

# Lower bounds for the integer settings
MINIMUM_VALUES = {
    "decimal_places": 2,
    "history_size": 1
}



def load_setting_value(key_value):
    settings_dict = dict(DEFAULT_SETTINGS)
    try:
        with open(config_json, 'r', encoding= 'utf-8') as f:
            settings_dict.update(json.load(f))

    except (FileNotFoundError, json.JSONDecodeError):
        pass


    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def load_setting_description(key_value):
    try:
        with open(ui_strings, 'r', encoding= 'utf-8') as f:
            settings_dict = json.load(f)

    except (FileNotFoundError, json.JSONDecodeError):
        return {}


    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def validate_setting(key_value, value):
    """Return the value as int if it is a valid integer setting, else raise ValueError."""
    new_value_int = int(value)
    minimum = MINIMUM_VALUES.get(key_value)
    if minimum is not None and new_value_int < minimum:
        raise ValueError(f"'{new_value_int}' is too small. Minimum is {minimum}.")
    return new_value_int


def save_setting(settings_dict):
    try:
        with open (config_json, 'w', encoding= 'utf-8') as f:
            json.dump(settings_dict, f, indent=4)
            return settings_dict

    except OSError:
        return{}
