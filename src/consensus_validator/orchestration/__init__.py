"""
Consensus orchestration.

  - ConsensusOrchestrator: gate, parallel dispatch, integrity filter, stub fallback
  - aggregate: pure mean / spread arithmetic over the surviving outputs
"""
from .aggregation import aggregate, confidence_from_spread, population_std
from .consensus import ConsensusOrchestrator
