from __future__ import annotations

import logging
import os
import subprocess
import sys
import time
import tkinter as tk
from tkinter import messagebox, ttk

from .config import Settings, parse_settings
from .exercises import ROUTINES, ExerciseKind, ExerciseView
from .logsetup import setup_logger
from .paths import mood_log_path
from .safety import ensure_private_files
from .session import CheckInSession, SessionSnapshot
from .storage import StorageWriteFailed

logger = logging.getLogger(__name__)


class CheckInApp(tk.Tk):
    def __init__(self, session: CheckInSession, settings: Settings):
        super().__init__()
        self.title("Mental Health Check-in")
        self.geometry("800x600")
        self.session = session
        self.settings = settings

        self._frame_job: str | None = None
        self._last_frame = time.monotonic()
        self._history_len = -1

        self._build_header()
        self._build_tabs()
        self._render()

        self._frame_job = self.after(self.settings.frame_interval_ms, self._frame)
        self.protocol("WM_DELETE_WINDOW", self._safe_cmd(self.session.on_exit))

    # -------- Crash guard --------

    def report_callback_exception(self, exc, val, tb):  # type: ignore[override]
        logger.error("Unhandled UI error", exc_info=(exc, val, tb))
        try:
            messagebox.showerror("Crash prevented", f"{exc.__name__}: {val}")
        except tk.TclError:
            pass

    def _safe_cmd(self, fn):
        def wrapped(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except Exception as e:
                logger.exception("UI command failed")
                try:
                    messagebox.showerror("Crash prevented", f"{type(e).__name__}: {e}")
                except tk.TclError:
                    pass
                return None

        return wrapped

    # -------------------------
    # Header
    # -------------------------

    def _build_header(self) -> None:
        frm = ttk.Frame(self, padding=10)
        frm.pack(fill="x")

        ttk.Label(frm, text="Mental Health Check-In", font=("TkDefaultFont", 16, "bold")).pack(side="left")

        ttk.Button(frm, text="Exit", command=self._safe_cmd(self.session.on_exit)).pack(side="right", padx=4)
        ttk.Button(frm, text="Open Data Folder", command=self._safe_cmd(self._open_data_folder)).pack(
            side="right", padx=4
        )
        ttk.Button(frm, text="View Mood History", command=self._safe_cmd(self._show_history)).pack(
            side="right", padx=4
        )

    def _open_data_folder(self) -> None:
        folder = self.settings.data_dir
        try:
            if sys.platform.startswith("win"):
                os.startfile(str(folder))  # type: ignore[attr-defined]
            elif sys.platform == "darwin":
                subprocess.run(["open", str(folder)], check=False)
            else:
                subprocess.run(["xdg-open", str(folder)], check=False)
            return
        except OSError as e:
            logger.warning("Could not open data folder: %s", e)
        messagebox.showinfo("Data location", f"Mood log:\n{self.session.profile.log_path}\n\nFolder:\n{folder}")

    # -------------------------
    # Tabs
    # -------------------------

    def _build_tabs(self) -> None:
        self.nb = ttk.Notebook(self)
        self.nb.pack(fill="both", expand=True, padx=10, pady=10)

        self.tab_checkin = ttk.Frame(self.nb, padding=10)
        self.tab_history = ttk.Frame(self.nb, padding=10)
        self.tab_relax = ttk.Frame(self.nb, padding=10)

        self.nb.add(self.tab_checkin, text="Mood Check-In")
        self.nb.add(self.tab_history, text="Mood History")
        self.nb.add(self.tab_relax, text="Relaxation Exercises")
        self.nb.bind("<<NotebookTabChanged>>", self._safe_cmd(self._tab_changed))

        self._build_checkin_tab()
        self._build_history_tab()
        self._build_relax_tab()

    def _tab_changed(self, _evt=None) -> None:
        if self.nb.select() == str(self.tab_history):
            self.session.on_request_history_view()
        else:
            self.session.on_close_history()

    # -------------------------
    # Check-in tab
    # -------------------------

    def _build_checkin_tab(self) -> None:
        left = ttk.Frame(self.tab_checkin)
        right = ttk.Frame(self.tab_checkin)
        left.pack(side="left", fill="y", padx=(0, 10))
        right.pack(side="right", fill="both", expand=True)

        snap = self.session.snapshot()
        ttk.Label(left, text=f"Hi {snap.user_name}, how are you feeling today?",
                  font=("TkDefaultFont", 12, "bold")).pack(anchor="w")
        ttk.Label(left, text="Please choose from the following options:").pack(anchor="w", pady=(0, 8))

        self.mood_choice = tk.IntVar(value=-1)
        for i, label in enumerate(snap.mood_options):
            ttk.Radiobutton(
                left,
                text=label,
                value=i,
                variable=self.mood_choice,
                command=self._safe_cmd(lambda i=i: self.session.on_mood_option_chosen(i)),
            ).pack(anchor="w")

        self.submit_btn = ttk.Button(left, text="Submit Mood", command=self._safe_cmd(self._submit_mood))
        self.submit_btn.pack(fill="x", pady=(10, 0))

        self.quote_box = ttk.LabelFrame(right, text="Daily Quote", padding=10)
        self.feeling_var = tk.StringVar()
        self.quote_var = tk.StringVar()
        ttk.Label(self.quote_box, textvariable=self.feeling_var, font=("TkDefaultFont", 11, "bold")).pack(anchor="w")
        ttk.Separator(self.quote_box).pack(fill="x", pady=6)
        ttk.Label(self.quote_box, textvariable=self.quote_var, wraplength=380, justify="left").pack(anchor="w")
        ttk.Button(self.quote_box, text="Close", command=self._safe_cmd(self.session.on_dismiss_quote)).pack(
            anchor="e", pady=(8, 0)
        )

    def _submit_mood(self) -> None:
        try:
            mood = self.session.on_submit_mood()
        except StorageWriteFailed:
            messagebox.showerror("Mood not saved", self.session.snapshot().last_error or "Could not save your mood.")
            self.session.on_dismiss_error()
            return
        if mood is not None:
            self.mood_choice.set(-1)

    # -------------------------
    # History tab
    # -------------------------

    def _build_history_tab(self) -> None:
        self.trend_var = tk.StringVar()
        ttk.Label(self.tab_history, textvariable=self.trend_var, font=("TkDefaultFont", 12, "bold")).pack(anchor="w")

        ttk.Separator(self.tab_history).pack(fill="x", pady=8)
        ttk.Label(self.tab_history, text="Recent moods:").pack(anchor="w")
        self.recent_var = tk.StringVar()
        ttk.Label(self.tab_history, textvariable=self.recent_var, justify="left").pack(anchor="w", padx=12)

        ttk.Separator(self.tab_history).pack(fill="x", pady=8)
        self.counts_var = tk.StringVar()
        ttk.Label(self.tab_history, textvariable=self.counts_var, foreground="#666").pack(anchor="w")

        ttk.Label(self.tab_history, text="Full history:").pack(anchor="w", pady=(8, 0))
        list_frame = ttk.Frame(self.tab_history, relief="sunken", borderwidth=1)
        list_frame.pack(fill="both", expand=True, pady=8)
        self.history_list = tk.Listbox(list_frame, height=14, borderwidth=0, highlightthickness=0)
        sb = ttk.Scrollbar(list_frame, orient="vertical", command=self.history_list.yview)
        self.history_list.configure(yscrollcommand=sb.set)
        sb.pack(side="right", fill="y")
        self.history_list.pack(side="left", fill="both", expand=True)

    def _show_history(self) -> None:
        self.session.on_request_history_view()
        self.nb.select(self.tab_history)

    # -------------------------
    # Relaxation tab
    # -------------------------

    def _build_relax_tab(self) -> None:
        menu = ttk.Frame(self.tab_relax)
        menu.pack(fill="x", pady=(0, 10))

        self._exercise_frames: dict[ExerciseKind, ttk.LabelFrame] = {}
        self._exercise_vars: dict[ExerciseKind, tuple[tk.StringVar, tk.StringVar, tk.DoubleVar]] = {}

        for kind, routine in ROUTINES.items():
            ttk.Button(
                menu,
                text=routine.title,
                command=self._safe_cmd(lambda k=kind: self.session.on_start_exercise(k)),
            ).pack(side="left", expand=True, fill="x", padx=2)

            box = ttk.LabelFrame(self.tab_relax, text=routine.title, padding=10)
            intro_var = tk.StringVar(value=routine.intro)
            step_var = tk.StringVar()
            progress_var = tk.DoubleVar(value=0.0)
            ttk.Label(box, textvariable=intro_var).pack(anchor="w")
            ttk.Label(box, textvariable=step_var, font=("TkDefaultFont", 11, "bold"), wraplength=600).pack(
                anchor="w", pady=4
            )
            ttk.Progressbar(box, variable=progress_var, maximum=1.0).pack(fill="x")
            ttk.Button(box, text="Stop", command=self._safe_cmd(lambda k=kind: self.session.on_stop_exercise(k))).pack(
                anchor="e", pady=(6, 0)
            )
            self._exercise_frames[kind] = box
            self._exercise_vars[kind] = (intro_var, step_var, progress_var)

    # -------------------------
    # Frame loop
    # -------------------------

    def _frame(self) -> None:
        now = time.monotonic()
        dt = now - self._last_frame
        self._last_frame = now

        completed = self.session.on_tick(dt)
        if completed:
            self.bell()

        self._render()
        if self.session.exit_requested:
            self._shutdown()
            return
        self._frame_job = self.after(self.settings.frame_interval_ms, self._frame)

    def _render(self) -> None:
        snap = self.session.snapshot()
        self._render_quote(snap)
        self._render_history(snap)
        self._render_exercises(snap.exercises)
        self.submit_btn.state(["!disabled"] if snap.selected_index is not None else ["disabled"])

    def _render_quote(self, snap: SessionSnapshot) -> None:
        if snap.current_quote is None:
            self.quote_box.pack_forget()
            return
        self.feeling_var.set(f"You're feeling: {snap.current_mood}")
        self.quote_var.set(snap.current_quote)
        if not self.quote_box.winfo_ismapped():
            self.quote_box.pack(fill="x", anchor="n")

    def _render_history(self, snap: SessionSnapshot) -> None:
        self.trend_var.set(f"Your most common mood: {snap.trend_text}")
        self.recent_var.set("\n".join(f"• {m}" for m in snap.recent_moods) or "—")
        self.counts_var.set("  ".join(f"{m}: {c}" for m, c in snap.mood_counts))

        if len(snap.full_history) == self._history_len:
            return
        self._history_len = len(snap.full_history)
        self.history_list.delete(0, tk.END)
        for i, m in enumerate(snap.full_history, start=1):
            self.history_list.insert(tk.END, f"{i}. {m}")

    def _render_exercises(self, views: tuple[ExerciseView, ...]) -> None:
        running = {v.kind: v for v in views}
        for kind, box in self._exercise_frames.items():
            v = running.get(kind)
            if v is None:
                box.pack_forget()
                continue
            _intro_var, step_var, progress_var = self._exercise_vars[kind]
            label = "Current muscle group" if kind is ExerciseKind.MUSCLE_RELAXATION else "Current step"
            text = f"{label}: {v.step_text}"
            if v.cycles > 1:
                text += f"  (round {v.cycle + 1}/{v.cycles})"
            step_var.set(text)
            progress_var.set(v.progress)
            if not box.winfo_ismapped():
                box.pack(fill="x", pady=4)

    def _shutdown(self) -> None:
        if self._frame_job:
            try:
                self.after_cancel(self._frame_job)
            except tk.TclError:
                pass
            self._frame_job = None
        self.destroy()


# -------------------------
# GUI Entrypoint
# -------------------------


def run_gui(argv=None) -> None:
    settings = parse_settings(argv)
    ensure_private_files(
        [mood_log_path(settings.user_name, settings.data_dir), settings.log_file],
        settings.allow_repo_data_path,
    )
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    setup_logger(settings.log_file, level=settings.log_level)

    session = CheckInSession.open(
        settings.user_name,
        settings.data_dir,
        quote_seed=settings.quote_seed,
        breathing_cycles=settings.breathing_cycles,
    )
    logger.info("Opened check-in for %s (%d moods logged)", settings.user_name, len(session.profile))
    app = CheckInApp(session, settings)
    app.mainloop()


if __name__ == "__main__":
    run_gui()
