"""
DBSCAN Trainer – a Tk window that walks through DBSCAN one point at a time.

Colours
=======
* Cluster colour with a black outline — **core**.
* Cluster colour with a grey outline — **border**.
* Small grey dot — **noise** (may still become border later).
* Light grey — not visited yet.

The yellow ring marks the point just visited, cyan rings its ε-neighbours,
and the shaded disc is its ε-radius. Click the canvas to add a point while
the animation is not running.
"""

import tkinter as tk

from ..config import EPSILON_RANGE, MIN_POINTS_RANGE, DBSCANConfig
from ..controller import SimulationController
from ..render import Circle, project
from ..simulations import DBSCANSimulation
from .base import TrainerWindow


class DBSCANTrainer(TrainerWindow):
    TITLE = "DBSCAN Trainer"

    def _build_view(self, parent):
        self.canvas = tk.Canvas(parent, bg="white")
        self.canvas.pack(fill="both", expand=True)
        self.canvas.bind("<Button-1>", lambda e: self.add_point(e.x, e.y))

    def _build_params(self, parent):
        self.eps = tk.DoubleVar(value=self.controller.config.epsilon)
        self.min_pts = tk.IntVar(value=self.controller.config.min_points)
        self.eps_lbl = self._add_scale(parent, "ε (eps)", self.eps, EPSILON_RANGE,
                                       self._on_eps_change, fmt="{:.0f}")
        self.minpts_lbl = self._add_scale(parent, "minPts", self.min_pts, MIN_POINTS_RANGE,
                                          self._on_min_pts_change, fmt="{:d}")

    def _on_eps_change(self, v):
        eps = round(float(v))
        self.eps_lbl.config(text=str(eps))
        if eps != self.controller.config.epsilon:
            self.set_param(epsilon=float(eps))

    def _on_min_pts_change(self, v):
        m = int(float(v))
        self.minpts_lbl.config(text=str(m))
        if m != self.controller.config.min_points:
            self.set_param(min_points=m)

    # ---------------------------------------------------------------- Drawing
    def draw(self, snapshot):
        self.canvas.delete("all")
        for item in project(snapshot):
            if isinstance(item, Circle):
                r = item.radius
                self.canvas.create_oval(
                    item.x - r, item.y - r, item.x + r, item.y + r,
                    fill=item.fill or "",
                    outline=item.outline or "",
                    width=item.width,
                    # Tk has no alpha; stipple is the closest thing.
                    stipple="gray25" if item.alpha < 1 else "",
                    tags=(item.tag,),
                )

def main(seed=None):
    controller = SimulationController(DBSCANSimulation(seed=seed), DBSCANConfig())
    DBSCANTrainer(controller).mainloop()


if __name__ == "__main__":
    main()
