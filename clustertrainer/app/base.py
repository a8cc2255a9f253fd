"""
Shared Tk window for the trainers: a drawing area on the left, a sidebar of
controls, legend and step explanation on the right.

The window is the host scheduler. While the controller is running it keeps
exactly one ``after()`` callback outstanding and calls
``controller.tick()`` from it; the controller decides when a step is due.
"""

import tkinter as tk
from tkinter import messagebox, ttk

from ..config import FRAME_INTERVAL_MS, SPEED_RANGE
from ..errors import ClusterTrainerError
from ..render import describe, legend


class TrainerWindow(tk.Tk):
    TITLE = "Cluster Trainer"

    def __init__(self, controller):
        super().__init__()
        self.title(self.TITLE)
        self.geometry("1100x620")

        self.controller = controller
        self._after_id = None
        self._param_widgets = []

        self.speed = tk.IntVar(value=controller.config.speed)

        self._build_ui()
        self.controller.subscribe(self._on_snapshot)
        self.protocol("WM_DELETE_WINDOW", self.on_close)
        self.after(100, lambda: self._on_snapshot(self.controller.snapshot()))

    # ---------------------------------------------------------------- UI
    def _build_ui(self):
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=8)
        self.grid_columnconfigure(1, weight=2)

        view = ttk.Frame(self)
        view.grid(row=0, column=0, sticky="nsew")
        self._build_view(view)

        ctrl = ttk.Frame(self)
        ctrl.grid(row=0, column=1, sticky="ns", padx=6, pady=6)

        self._build_params(ctrl)

        ttk.Label(ctrl, text="Animation speed").pack(anchor="w", pady=(4, 0))
        sp_row = ttk.Frame(ctrl); sp_row.pack(anchor="w")
        low, high = SPEED_RANGE
        speed_scale = ttk.Scale(sp_row, from_=low, to=high, length=140, orient="horizontal",
                                variable=self.speed, command=self._on_speed_change)
        speed_scale.pack(side="left")
        self.speed_lbl = ttk.Label(sp_row, text=str(self.speed.get()))
        self.speed_lbl.pack(side="left", padx=4)
        self._param_widgets.append(speed_scale)

        nav = ttk.LabelFrame(ctrl, text="Navigation")
        nav.pack(anchor="w", pady=8, fill="x")
        btn_width = 16
        self.play_btn = ttk.Button(nav, text="Start ▶︎", command=self.toggle, width=btn_width)
        self.play_btn.grid(row=0, column=0, padx=2, pady=2)
        self.step_btn = ttk.Button(nav, text="Step ⏭", command=self.step, width=btn_width)
        self.step_btn.grid(row=0, column=1, padx=2, pady=2)
        self.ff_btn = ttk.Button(nav, text="Fast-forward ⏩", command=self.fast_forward, width=btn_width)
        self.ff_btn.grid(row=1, column=0, padx=2, pady=2)
        ttk.Button(nav, text="Reset", command=self.reset, width=btn_width).grid(row=1, column=1, padx=2, pady=2)

        ttk.Label(ctrl, text="Legend:").pack(anchor="w")
        self.legend_frame = ttk.Frame(ctrl); self.legend_frame.pack(anchor="w")

        ttk.Label(ctrl, text="Step explanation:").pack(anchor="w", pady=(8, 0))
        self.explanation = tk.Text(ctrl, width=34, height=14, wrap="word", state="disabled", font=("Arial", 9))
        self.explanation.pack()

    def _build_view(self, parent):
        raise NotImplementedError

    def _build_params(self, parent):
        raise NotImplementedError

    def _add_scale(self, parent, text, variable, bounds, command, fmt="{:g}"):
        ttk.Label(parent, text=text).pack(anchor="w", pady=(4, 0))
        row = ttk.Frame(parent); row.pack(anchor="w")
        low, high = bounds
        scale = ttk.Scale(row, from_=low, to=high, length=140, orient="horizontal",
                          variable=variable, command=command)
        scale.pack(side="left")
        lbl = ttk.Label(row, text=fmt.format(variable.get()))
        lbl.pack(side="left", padx=4)
        self._param_widgets.append(scale)
        return lbl

    # ---------------------------------------------------------------- Drawing
    def draw(self, snapshot):
        raise NotImplementedError

    def _on_snapshot(self, snapshot):
        self.draw(snapshot)
        self._update_legend(snapshot)
        self._explain(describe(snapshot))

        running = snapshot.is_running
        state = "disabled" if running else "normal"
        for w in self._param_widgets:
            w.configure(state=state)
        self.step_btn.configure(state=state)
        self.ff_btn.configure(state=state)
        self.play_btn.configure(text="Pause ⏸" if running else "Start ▶︎")

    def _update_legend(self, snapshot):
        for w in self.legend_frame.winfo_children():
            w.destroy()
        for text, colour in legend(snapshot):
            row = ttk.Frame(self.legend_frame); row.pack(anchor="w")
            tk.Canvas(row, width=12, height=12, bg=colour, highlightthickness=1,
                      highlightbackground="black").pack(side="left")
            ttk.Label(row, text=text).pack(side="left", padx=4)

    def _explain(self, text):
        self.explanation.config(state="normal"); self.explanation.delete("1.0", tk.END)
        self.explanation.insert(tk.END, text); self.explanation.config(state="disabled")

    # ---------------------------------------------------------------- Scheduling
    def _schedule(self):
        if self._after_id is None:
            self._after_id = self.after(FRAME_INTERVAL_MS, self._on_frame)

    def _cancel(self):
        if self._after_id is not None:
            self.after_cancel(self._after_id)
            self._after_id = None

    def _on_frame(self):
        self._after_id = None
        if self.controller.tick():
            self._schedule()

    # ---------------------------------------------------------------- Actions
    def _guarded(self, action, *args):
        try:
            return action(*args)
        except ClusterTrainerError as exc:
            messagebox.showinfo("Info", str(exc))
            return None

    def toggle(self):
        if self._guarded(self.controller.toggle):
            self._schedule()
        else:
            self._cancel()

    def step(self):
        self._guarded(self.controller.step)

    def fast_forward(self):
        self._guarded(self.controller.fast_forward)

    def reset(self):
        self._cancel()
        self.controller.reset()

    def set_param(self, **changes):
        if not self.controller.can_edit:
            return
        self._guarded(lambda: self.controller.update_config(**changes))

    def _on_speed_change(self, v):
        value = int(float(v))
        self.speed_lbl.config(text=str(value))
        if value != self.controller.config.speed:
            self.set_param(speed=value)

    def add_point(self, x, y):
        self._guarded(self.controller.add_point, x, y)

    def on_close(self):
        self._cancel()
        self.destroy()
