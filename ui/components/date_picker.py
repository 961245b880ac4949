import tkinter as tk
from tkinter import ttk
import customtkinter as ctk
from tkcalendar import Calendar
from utils.date_helpers import (
    format_date, format_display_date, parse_date, parse_display_date, today,
)


class DatePickerWidget(ctk.CTkFrame):
    """Entry in the user's display format plus a calendar popup.

    .get() returns YYYY-MM-DD (or '' when empty); .set() takes YYYY-MM-DD.
    on_change, if given, is called after every accepted edit.
    """

    def __init__(
        self,
        master,
        initial_date: str | None = None,
        date_format: str = "MM/DD/YYYY",
        on_change=None,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self._date_format = date_format
        self._on_change = on_change
        self._popup: ctk.CTkToplevel | None = None

        self._var = tk.StringVar(
            value=format_display_date(initial_date, date_format) if initial_date else ""
        )
        self._entry = ctk.CTkEntry(self, textvariable=self._var, width=110)
        self._entry.grid(row=0, column=0, sticky="ew")
        self._entry.bind("<FocusOut>", self._on_focus_out)
        self._entry.bind("<Return>", self._on_focus_out)

        ctk.CTkButton(self, text="📅", width=32, command=self._open_popup).grid(
            row=0, column=1, padx=(4, 0)
        )

    def _parse(self):
        raw = self._var.get().strip()
        if not raw:
            return None
        d = parse_display_date(raw, self._date_format)
        if d is None:
            d = parse_date(raw.replace("/", "-").replace(".", "-"))
        return d

    def get(self) -> str:
        d = self._parse()
        if d:
            return format_date(d)
        return self._var.get().strip()

    def set(self, date_str: str):
        self._var.set(format_display_date(date_str, self._date_format) if date_str else "")
        self._reset_border()

    def is_valid(self) -> bool:
        return self._parse() is not None

    def _changed(self):
        if self._on_change:
            self._on_change()

    def _on_focus_out(self, _event=None):
        if not self._var.get().strip():
            self._reset_border()
            self._changed()
            return
        d = self._parse()
        if d:
            self._var.set(format_display_date(format_date(d), self._date_format))
            self._reset_border()
            self._changed()
        else:
            self._entry.configure(border_color="#F44336")

    def _reset_border(self):
        self._entry.configure(border_color=("gray65", "gray35"))

    def _open_popup(self):
        if self._popup and self._popup.winfo_exists():
            self._popup.destroy()
            self._popup = None
            return

        popup = ctk.CTkToplevel(self)
        popup.overrideredirect(True)
        popup.resizable(False, False)
        self._popup = popup

        dark = ctk.get_appearance_mode() == "Dark"
        bg, fg = ("#2b2b2b", "#ffffff") if dark else ("#ffffff", "#000000")
        style = ttk.Style(popup)
        style.theme_use("default")
        style.configure("Calendar.Treeview", background=bg, foreground=fg, fieldbackground=bg)

        current = self._parse() or today()
        cal = Calendar(
            popup,
            selectmode="day",
            year=current.year, month=current.month, day=current.day,
            date_pattern="yyyy-mm-dd",
            firstweekday="sunday",
            background=bg, foreground=fg,
            headersbackground=bg, headersforeground=fg,
            selectbackground="#1f6aa5",
            weekendbackground=bg, weekendforeground=fg,
            othermonthforeground="gray60",
            bordercolor=bg,
        )
        cal.pack(padx=4, pady=4)
        cal.bind("<<CalendarSelected>>", lambda e: self._on_date_selected(cal, popup))

        self._entry.update_idletasks()
        x = self._entry.winfo_rootx()
        y = self._entry.winfo_rooty() + self._entry.winfo_height() + 2
        popup.geometry(f"+{x}+{y}")

    def _on_date_selected(self, cal, popup):
        # cal always returns yyyy-mm-dd
        self.set(cal.get_date())
        popup.destroy()
        self._popup = None
        self._changed()
