"""
K-Means Trainer – a Tk window with an embedded matplotlib plot.

Points are coloured by their current cluster; the large outlined circles are
the centroids. Each step is one full assign + update iteration.
"""

import tkinter as tk

import matplotlib
matplotlib.use("TkAgg")
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.figure import Figure

from ..config import K_RANGE, MAX_ITERATIONS_RANGE, KMeansConfig
from ..controller import SimulationController
from ..plotting import draw_primitives, snapshot_title
from ..render import project
from ..simulations import KMeansSimulation
from .base import TrainerWindow


class KMeansTrainer(TrainerWindow):
    TITLE = "K-Means Trainer"

    def _build_view(self, parent):
        self.fig = Figure(figsize=(8, 5))
        self.ax = self.fig.add_subplot(111)
        self.mpl_canvas = FigureCanvasTkAgg(self.fig, master=parent)
        self.mpl_canvas.draw()
        self.mpl_canvas.get_tk_widget().pack(fill=tk.BOTH, expand=True)
        self.mpl_canvas.mpl_connect("button_press_event", self._on_click)

    def _build_params(self, parent):
        self.target_k = tk.IntVar(value=self.controller.config.k)
        self.max_iter = tk.IntVar(value=self.controller.config.max_iterations)
        self.k_lbl = self._add_scale(parent, "Number of clusters (K)", self.target_k, K_RANGE,
                                     self._on_k_change, fmt="{:d}")
        self.iter_lbl = self._add_scale(parent, "Max iterations", self.max_iter, MAX_ITERATIONS_RANGE,
                                        self._on_max_iter_change, fmt="{:d}")

    def _on_k_change(self, v):
        k = int(float(v))
        self.k_lbl.config(text=str(k))
        if k != self.controller.config.k:
            self.set_param(k=k)

    def _on_max_iter_change(self, v):
        n = int(float(v))
        self.iter_lbl.config(text=str(n))
        if n != self.controller.config.max_iterations:
            self.set_param(max_iterations=n)

    def _on_click(self, event):
        if event.inaxes is not self.ax or event.xdata is None:
            return
        self.add_point(event.xdata, event.ydata)

    # ---------------------------------------------------------------- Drawing
    def draw(self, snapshot):
        draw_primitives(self.ax, project(snapshot), snapshot.bounds, title=snapshot_title(snapshot))
        self.mpl_canvas.draw_idle()


def main(seed=None):
    controller = SimulationController(KMeansSimulation(seed=seed), KMeansConfig())
    KMeansTrainer(controller).mainloop()


if __name__ == "__main__":
    main()
