"""
Cluster Trainer – step-by-step K-means and DBSCAN for teaching.

Modules
-------
- geometry: points, centroids, distance and the ε-neighbourhood query.
- kmeans / dbscan: the clustering kernels, one unit of work per step.
- controller: the stepwise simulation controller and its snapshots.
- simulations: the kernels wired to data generation and configuration.
- render / plotting: snapshot → primitives → matplotlib.
- app: the Tk windows (imported lazily, they need a display).
"""

from .config import DBSCANConfig, KMeansConfig
from .controller import SimulationController, SimulationState, Snapshot
from .errors import ClusterTrainerError, ConfigurationError, SimulationStateError
from .geometry import Classification, Point, distance, neighbors
from .simulations import DBSCANSimulation, KMeansSimulation

__version__ = "0.1.0"
