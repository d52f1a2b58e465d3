"""
Remote service layer: capability probing, request dispatch and response normalization.

    services/
    ├── prober.py      # HEAD GetCapabilities before any substantive request
    ├── dispatcher.py  # URL composition + GET
    └── normalizer.py  # Raw payload -> tabular / geometry / linked-data shapes
"""
