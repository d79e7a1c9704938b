# geopower — volumetric geothermal power potential with Monte Carlo uncertainty
from .adapter import BasicInput, BasicResults, run_basic, to_scientific, from_scientific
from .distributions import Constant, Distribution, LogNormal, Normal, Triangular, Uniform, sample
from .errors import ConfigError, GeoPowerError, ParameterError
from .models import GeothermalInput, PlantSpec, ProjectInfo, ReservoirSpec, SimulationConfig
from .monte_carlo import BaseCase, GeothermalResults, base_case, run_simulation, simulate
from .rng import LegacyLCG, NumpyVariates, create_generator
from .statistics import RiskLevel, analyze, classify
from .volumetric import AreaThickness, VolumeGeometry

__version__ = "0.1.0"
