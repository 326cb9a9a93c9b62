# UI.py
""""PySide6 user interface for the stack calculator.

Structure
---------
- Calculator UI: main window with display, button grid and history list
- Settings UI: modal dialog for user preferences

Responsibilities (Calculator)
-----------------------------
- Build window, display, layout and buttons
- Turn button presses and key presses into expression text
- Maintain undo/redo and the "Ans" value
- Dispatch the expression to MathEngine in a worker thread
- Render results, record them in the HistoryManager, show errors as dialogs
- Clipboard integration and optional auto-evaluate after paste

Responsibilities (Settings)
---------------------------
- Load current settings and their descriptions via config_manager
- Validate user input (minimum decimal places / history entries)
- Save and apply theme changes immediately

Threading Note
--------------
Evaluation runs off the UI thread in Worker(QObject). Results (or errors)
are emitted via a Qt signal and handled back in the UI thread.
"""""

from PySide6 import QtWidgets, QtGui
from PySide6.QtCore import Qt, QObject, Signal, QTimer
import sys
import threading
from pynput.keyboard import Controller
import pyperclip
from . import error as E  # Imports error.py as a module
from . import config_manager as config_manager  # Imports config_manager.py as a module
from . import MathEngine as MathEngine  # Imports MathEngine.py as a module
from .history_manager import HistoryManager

ENTER = '⏎'
SETTINGS = '⚙'
COPY = '📋'
PASTE = '📑'
UNDO = '↶'
REDO = '↷'
BACKSPACE = '<'
CLEAR = 'C'
HISTORY = '🕘'
ANS = 'Ans'

# Keys typed on the keyboard that are inserted into the expression as-is
TYPED_CHARACTERS = set("0123456789.+-*/%^!()abcdefghijklmnopqrstuvwxyz")

# Input that replaces a shown result instead of continuing from it
STARTS_NEW_EXPRESSION = set("0123456789.(abcdefghijklmnopqrstuvwxyz") | {"pi", "sin(", "cos(", "tan(", "sqrt(", "ln(", "log(", "abs("}


def is_shift_pressed():
    """""

    Small and simple check, whether shift is pressed or not.
    Used for the "shift to paste" behaviour of the clipboard button.

    """""

    keyboard_controller = Controller()
    return keyboard_controller.shift_pressed


class Worker(QObject):
    """""

    Runs in a separate thread, hands the expression to MathEngine.py
    and emits a Signal when the calculation is done / failed back to the Calculator UI.

    """""

    job_finished = Signal(object, object, str)

    def __init__(self, problem):
        super().__init__()
        self.data = problem

    def run_Calc(self):

        try:
            # --- 1. Start Calculation ---
            value, display = MathEngine.calculate(self.data)

            # --- 2. Send Success Signal ---
            self.job_finished.emit(value, display, self.data)

        except E.MathError as e:
            # --- 3. Send Math Error Signal ---
            # A known, handled error (e.g. "Division by zero")
            self.job_finished.emit(e, None, self.data)

        except Exception as e:
            # --- 4. Send Critical Error Signal ---
            critical_error = E.MathError(
                message=f"Unexpected crash: {e}",
                code="9999",
                equation=self.data
            )
            self.job_finished.emit(critical_error, None, self.data)


class SettingsDialog(QtWidgets.QDialog):
    """""

    Manages the settings window, saves the new settings and opens an error
    message if something went wrong.

    All of the Settings fall into two categories:
    1. Checkboxes   (Managed with True or False)
    2. Input Fields (Managed as an Integer)

    """""

    settings_saved = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets = {}  # Setting key -> widget

        # --- 1. Window Setup ---
        self.setWindowTitle("Calculator Settings")
        self.setMinimumSize(320, 240)

        main_layout = QtWidgets.QVBoxLayout(self)

        # --- 2. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")
        self.setting_description_list = config_manager.load_setting_description("all")

        # --- 3. Build Widgets ---
        for key_value, value in self.setting_value_list.items():
            description = self.setting_description_list.get(key_value, key_value)

            # --- 3a. Checkbox Builder (for Boolean settings) ---
            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(description)
                checkbox.setChecked(value)
                main_layout.addWidget(checkbox)
                self.widgets[key_value] = checkbox

            # --- 3b. Input Field Builder (for Integer settings) ---
            elif isinstance(value, int):
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                minimum = config_manager.MINIMUM_VALUES.get(key_value)
                label_text = description if minimum is None else f"{description} (min. {minimum}):"
                label = QtWidgets.QLabel(label_text)
                input_field = QtWidgets.QLineEdit()
                input_field.setPlaceholderText(str(value))  # Show current value as placeholder

                row_h_layout.addWidget(label)
                row_h_layout.addWidget(input_field)
                row_h_layout.setStretch(1, 1)
                self.widgets[key_value] = input_field

        # --- 4. OK / Cancel Buttons ---
        button_box = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel)
        main_layout.addWidget(button_box)
        main_layout.addStretch(1)

        button_box.accepted.connect(lambda: self.save_settings(self.setting_value_list))
        button_box.rejected.connect(self.reject)

        self.update_darkmode()

    def save_settings(self, setting_value_list):
        for key_value, widget in self.widgets.items():

            # --- 1. Handle Checkboxes ---
            if isinstance(widget, QtWidgets.QCheckBox):
                setting_value_list[key_value] = widget.isChecked()

            # --- 2. Handle Input Fields (like 'decimal_places') ---
            elif isinstance(widget, QtWidgets.QLineEdit):
                new_value_str = widget.text().strip()

                # If user left it blank, keep the old value
                if new_value_str == "":
                    continue

                try:
                    setting_value_list[key_value] = config_manager.validate_setting(key_value, new_value_str)

                except ValueError as e:
                    # --- 3. Input Validation Error ---
                    # Show an error box and STOP the save process
                    print(f"Invalid Input: {e}")
                    QtWidgets.QMessageBox.critical(self, "Invalid Input:",
                                                   f"Error 5001: {E.ERROR_MESSAGES['5001']}'{key_value}'\n\n{e}\n\nPlease correct your input.")
                    return  # Stop saving!

        # --- 4. Write to File ---
        saved_settings = config_manager.save_setting(setting_value_list)

        if saved_settings != {}:
            self.settings_saved.emit()
            self.accept()
        else:
            QtWidgets.QMessageBox.critical(self, "Error", f"Error 5000: {E.ERROR_MESSAGES['5000']}")

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("""
                        QDialog {background-color: #121212;}
                        QLabel {color: white;}
                        QCheckBox {color: white;}
                        QLineEdit {background-color: #444444;color: white;border: 1px solid #666666;}
                        QDialogButtonBox QPushButton {background-color: #666666;color: white;}""")
        else:
            self.setStyleSheet("")


class CalculatorWindow(QtWidgets.QWidget):
    # --- Class-level attributes for button hold logic ---
    initial_delay = 500
    repeat_interval = 100

    def __init__(self):
        super().__init__()

        # --- 1. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")
        self.history_manager = HistoryManager(self.setting_value_list["history_size"])

        # --- 2. Instance State Variables ---
        self.ans = ""  # Last result, inserted by the Ans button
        self.display_text = "0"  # The expression currently being built
        self.thread_active = False  # Is a calculation running?
        self.received_result = False  # Is the display showing a result?
        self.shift_is_held = False
        self.undo = ["0"]
        self.redo = []
        self.was_held = False
        self.held_button_value = None
        self.hold_timer = QTimer(self)
        self.hold_timer.timeout.connect(self.handle_hold_tick)

        # --- 3. Window Setup ---
        self.button_objects = {}
        self.setWindowTitle("Calculator")
        self.setMinimumSize(400, 600)
        main_v_layout = QtWidgets.QVBoxLayout(self)

        expanding_policy = QtWidgets.QSizePolicy(
            QtWidgets.QSizePolicy.Policy.Expanding,
            QtWidgets.QSizePolicy.Policy.Expanding
        )

        # --- 4. Display Setup ---
        self.display = QtWidgets.QLineEdit("0")
        self.display.setAlignment(Qt.AlignmentFlag.AlignRight)
        self.display.setReadOnly(True)
        font = self.display.font()
        font.setPointSize(36)
        self.display.setFont(font)
        self.display.setSizePolicy(expanding_policy)
        main_v_layout.addWidget(self.display, 1)

        # --- 5. History Panel (hidden until toggled) ---
        self.history_list = QtWidgets.QListWidget()
        self.history_list.setVisible(False)
        self.history_list.itemDoubleClicked.connect(self.reuse_history_entry)
        main_v_layout.addWidget(self.history_list, 1)

        # --- 6. Button Grid Setup ---
        button_container = QtWidgets.QWidget()
        main_v_layout.addWidget(button_container, 4)
        button_grid = QtWidgets.QGridLayout(button_container)
        button_grid.setSpacing(0)
        button_grid.setContentsMargins(0, 0, 0, 0)

        for i in range(8):
            button_grid.setRowStretch(i, 1)
        for j in range(5):
            button_grid.setColumnStretch(j, 1)

        # --- 7. Button Definitions ---
        # (text, row, column, column span)
        self.buttons = [
            (SETTINGS, 0, 0, 1), (COPY, 0, 1, 1), (UNDO, 0, 2, 1), (REDO, 0, 3, 1), (BACKSPACE, 0, 4, 1),
            ('sin(', 1, 0, 1), ('cos(', 1, 1, 1), ('tan(', 1, 2, 1), ('pi', 1, 3, 1), ('e', 1, 4, 1),
            ('sqrt(', 2, 0, 1), ('ln(', 2, 1, 1), ('log(', 2, 2, 1), ('abs(', 2, 3, 1), ('!', 2, 4, 1),
            ('(', 3, 0, 1), (')', 3, 1, 1), ('%', 3, 2, 1), ('^', 3, 3, 1), ('/', 3, 4, 1),
            ('7', 4, 0, 1), ('8', 4, 1, 1), ('9', 4, 2, 1), ('*', 4, 3, 1), (CLEAR, 4, 4, 1),
            ('4', 5, 0, 1), ('5', 5, 1, 1), ('6', 5, 2, 1), ('-', 5, 3, 1), (HISTORY, 5, 4, 1),
            ('1', 6, 0, 1), ('2', 6, 1, 1), ('3', 6, 2, 1), ('+', 6, 3, 1), (ANS, 6, 4, 1),
            ('0', 7, 0, 1), ('.', 7, 1, 1), (ENTER, 7, 2, 3)
        ]

        # Buttons that support "press and hold"
        HOLD_BUTTONS = ['0', '1', '2', '3', '4', '5', '6', '7', '8', '9', UNDO, REDO, BACKSPACE]

        # --- 8. Button Creation Loop ---
        for text, row, col, span in self.buttons:
            button = QtWidgets.QPushButton(text)
            button.setSizePolicy(expanding_policy)

            if text == SETTINGS:
                button.clicked.connect(self.open_settings)
            elif text in HOLD_BUTTONS:
                button.pressed.connect(lambda val=text: self.handle_button_pressed_hold(val))
                button.released.connect(self.handle_button_released_hold)
                button.clicked.connect(lambda checked=False, val=text: self.handle_button_clicked_hold(val))
            else:
                button.clicked.connect(lambda checked=False, val=text: self.handle_button_press(val))

            button_grid.addWidget(button, row, col, 1, span)
            self.button_objects[text] = button

        self.update_darkmode()

    # --- Button Hold Logic ---
    def handle_button_pressed_hold(self, value):
        self.was_held = False
        self.held_button_value = value
        self.hold_timer.setInterval(self.initial_delay)
        self.hold_timer.start()

    def handle_button_released_hold(self):
        self.hold_timer.stop()
        self.held_button_value = None

    def handle_button_clicked_hold(self, value):
        # A click right after a hold must not fire again
        if not self.was_held:
            self.handle_button_press(value)

    def handle_hold_tick(self):
        self.was_held = True
        if self.hold_timer.interval() == self.initial_delay:
            self.hold_timer.setInterval(self.repeat_interval)

        if self.held_button_value:
            self.handle_button_press(self.held_button_value)

    # --- Window/Key Event Handlers ---
    def update_button_labels(self):
        """Shift held shows the clipboard button as Paste, otherwise Copy."""
        copy_button = self.button_objects.get(COPY)
        if copy_button:
            copy_button.setText(PASTE if self.shift_is_held else COPY)

    def keyPressEvent(self, event):
        key = event.key()
        if key == Qt.Key.Key_Shift:
            self.shift_is_held = True
            self.update_button_labels()
        elif key in (Qt.Key.Key_Return, Qt.Key.Key_Enter, Qt.Key.Key_Equal):
            self.handle_button_press(ENTER)
        elif key == Qt.Key.Key_Backspace:
            self.handle_button_press(BACKSPACE)
        elif key in (Qt.Key.Key_Escape, Qt.Key.Key_Delete):
            self.handle_button_press(CLEAR)
        elif event.text() and event.text().lower() in TYPED_CHARACTERS:
            self.handle_button_press(event.text().lower())
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.shift_is_held = False
            self.update_button_labels()
        super().keyReleaseEvent(event)

    def handle_button_press(self, value):
        if value == BACKSPACE:
            if self.received_result:
                self.display_text = "0"
            else:
                self.display_text = self.display_text[:-1]
            if self.display_text == "":
                self.display_text = "0"
            self.received_result = False

        elif value == CLEAR:
            self.display_text = "0"
            self.received_result = False

        elif value == UNDO:
            if len(self.undo) > 1:
                self.redo.append(self.undo.pop())
                self.display_text = self.undo[-1]
                self.received_result = False

        elif value == REDO:
            if self.redo:
                self.undo.append(self.redo.pop())
                self.display_text = self.undo[-1]
                self.received_result = False

        elif value in (COPY, PASTE):
            self.handle_clipboard()
            return

        elif value == HISTORY:
            self.history_list.setVisible(not self.history_list.isVisible())
            return

        elif value == ENTER:
            self.start_calculation()
            return

        else:
            if value == ANS:
                if self.ans == "":
                    self.show_error(E.MathError(E.ERROR_MESSAGES["4001"], code="4001"))
                    return
                value = self.ans

            if self.received_result:
                # Continue from the last result with an operator, otherwise start over
                if value in STARTS_NEW_EXPRESSION or value == self.ans:
                    self.display_text = ""
                else:
                    self.display_text = self.ans
                self.received_result = False

            if self.display_text == "0" and value != ".":
                self.display_text = ""
            self.display_text += value

        if value not in (UNDO, REDO):
            self.undo.append(self.display_text)
            self.redo.clear()

        self.display.setText(self.display_text)
        self.update_font_size_display()

    def handle_clipboard(self):
        # Shift (held in the window or on the keyboard) pastes, a plain click copies
        if self.shift_is_held or is_shift_pressed():
            clipboard_text = QtWidgets.QApplication.clipboard().text().strip()
            if not clipboard_text:
                return

            if self.display_text == "0" or self.received_result:
                self.display_text = clipboard_text
            else:
                self.display_text += clipboard_text
            self.received_result = False

            self.display.setText(self.display_text)
            self.undo.append(self.display_text)
            self.redo.clear()
            self.update_font_size_display()

            if self.setting_value_list["after_paste_enter"] == True:
                self.start_calculation()
        else:
            pyperclip.copy(self.display.text())

    def start_calculation(self):
        if self.thread_active:
            print(f"ERROR: {E.ERROR_MESSAGES['4000']}")
            return
        if self.received_result:
            return

        self.thread_active = True
        self.update_return_button()
        self.display.setText("...")
        QtWidgets.QApplication.processEvents()  # Force UI update *before* starting thread

        worker_instance = Worker(self.display_text)
        worker_instance.job_finished.connect(self.Calc_result)
        self.worker_instance = worker_instance  # Keep the QObject alive until it reports back
        my_thread = threading.Thread(target=worker_instance.run_Calc, daemon=True)
        my_thread.start()

    def update_font_size_display(self):
        # --- Dynamic Font Resizing for Display ---
        current_text = self.display.text()
        MAX_FONT_SIZE = 48
        MIN_FONT_SIZE = 10

        font = self.display.font()
        current_size = font.pointSizeF()

        margins = self.display.textMargins()
        available_width = self.display.width() - (margins.left() + margins.right() + 10)

        # --- Shrink font if too big ---
        while current_size > MIN_FONT_SIZE:
            font.setPointSizeF(current_size)
            if QtGui.QFontMetrics(font).horizontalAdvance(current_text) <= available_width:
                break
            current_size -= 0.5

        # --- Grow font while it still fits ---
        while current_size < MAX_FONT_SIZE:
            font.setPointSizeF(current_size + 0.5)
            if QtGui.QFontMetrics(font).horizontalAdvance(current_text) > available_width:
                break
            current_size += 0.5

        font.setPointSizeF(current_size)
        self.display.setFont(font)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        for button_instance in self.button_objects.values():
            font = button_instance.font()
            font.setPointSize(max(12, int(button_instance.height() / 4)))
            button_instance.setFont(font)
        self.update_font_size_display()

    def update_return_button(self):
        return_button = self.button_objects.get(ENTER)
        if not return_button:
            return

        # Red "X" while busy, blue "⏎" when idle
        if self.thread_active == True:
            return_button.setStyleSheet("background-color: #FF0000; color: white; font-weight: bold;")
            return_button.setText("X")
        else:
            return_button.setStyleSheet("background-color: #007bff; color: white; font-weight: bold;")
            return_button.setText(ENTER)
        return_button.update()

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            for text, button in self.button_objects.items():
                if text != ENTER:
                    button.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")
            self.setStyleSheet("background-color: #121212;")
            self.display.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")
            self.history_list.setStyleSheet("background-color: #1e1e1e; color: white;")
        else:
            for text, button in self.button_objects.items():
                if text != ENTER:
                    button.setStyleSheet("font-weight: normal;")
            self.setStyleSheet("")
            self.display.setStyleSheet("font-weight: bold;")
            self.history_list.setStyleSheet("")
        self.update_return_button()

    def open_settings(self):
        settings_dialog = SettingsDialog(self)
        settings_dialog.exec()  # Modal

        # --- Reload settings after dialog closes ---
        self.setting_value_list = config_manager.load_setting_value("all")
        MathEngine.debug = self.setting_value_list["debug"]
        if self.setting_value_list["history_size"] != self.history_manager.max_size:
            self.history_manager.resize(self.setting_value_list["history_size"])
            self.refresh_history()
        self.update_darkmode()

    def refresh_history(self):
        self.history_list.clear()
        self.history_list.addItems(self.history_manager.get_history())
        self.history_list.scrollToBottom()

    def reuse_history_entry(self, item):
        # "expr = result" or "expr → ERROR: ..." -> put expr back on the display
        entry = item.text()
        for separator in (" = ", " → "):
            if separator in entry:
                entry = entry.split(separator, 1)[0]
                break
        self.display_text = entry
        self.received_result = False
        self.display.setText(self.display_text)
        self.undo.append(self.display_text)
        self.redo.clear()
        self.update_font_size_display()

    def get_message_box_stylesheet(self):
        if self.setting_value_list["darkmode"] == True:
            return """
                QMessageBox {
                    background-color: #121212;
                    color: white;
                }
                QLabel {
                    color: white;
                }
                QPushButton {
                    background-color: #2e2e2e;
                    color: white;
                    border: 1px solid #444444;
                    padding: 5px 15px;
                }
                QPushButton:hover {
                    background-color: #444444;
                }
            """
        else:
            return ""

    def show_error(self, error_obj):
        error_box = QtWidgets.QMessageBox(self)
        error_code = error_obj.code
        additional_info = f"Details: {error_obj.message}\nEquation: {error_obj.equation}"
        title = error_obj.kind.description if error_obj.kind is not None else "Calculation error"

        error_box.setIcon(QtWidgets.QMessageBox.Critical)
        error_box.setWindowTitle(title)
        error_box.setText(f"Error {error_code}: {E.ERROR_MESSAGES.get(error_code, 'Unknown error')}")
        error_box.setInformativeText(additional_info)
        error_box.setStandardButtons(QtWidgets.QMessageBox.Ok)
        error_box.setStyleSheet(self.get_message_box_stylesheet())
        error_box.exec()

    def Calc_result(self, result, display, equation):
        self.thread_active = False
        self.update_return_button()

        if isinstance(result, E.MathError):
            description = result.kind.description if result.kind is not None else result.message
            self.history_manager.add_error_entry(equation, description)
            self.refresh_history()
            self.show_error(result)
            self.display.setText(equation)
            self.update_font_size_display()
            return

        self.history_manager.add_entry(equation, result)
        self.refresh_history()
        try:
            self.ans = MathEngine.ans_text(result)
        except E.MathError:
            # inf / nan cannot be typed back in; the Ans button reports 4001
            self.ans = ""
        self.received_result = True

        if self.setting_value_list["show_equation"] == True:
            final_display_text = f"{equation} {display}"
        else:
            final_display_text = display.split(" ", 1)[1]

        self.display.setText(final_display_text)
        self.update_font_size_display()


def main():
    # --- Main Application Entry Point ---
    app = QtWidgets.QApplication(sys.argv)
    window = CalculatorWindow()
    window.show()
    sys.exit(app.exec())
