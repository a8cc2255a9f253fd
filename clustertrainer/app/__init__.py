"""Tk host windows. Importing this package requires tkinter."""

from .dbscan_app import DBSCANTrainer
from .kmeans_app import KMeansTrainer
