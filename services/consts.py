# Branch holding the number of towers in the entry
SIZE_BRANCH = "CaloSize"

# Tower column -> branch name in the CaloTree
TOWER_BRANCHES = {
    "eta": "CaloEta",
    "phi": "CaloPhi",
    "eb_count": "CaloEBHits",
    "ee_count": "CaloEEHits",
    "hb_count": "CaloHBHits",
    "he_count": "CaloHEHits",
    "hf_count": "CaloHFHits",
    "em_energy": "CaloEmEnergy",
    "had_energy": "CaloHadEnergy",
    "total_energy": "CaloEnergy",
}

# Storage type of every tower column. Wide enough to hold the float32/int32
# branches of the CaloTree and in-memory Python values exactly.
TOWER_DTYPES = {
    "eta": "float64",
    "phi": "float64",
    "eb_count": "int64",
    "ee_count": "int64",
    "hb_count": "int64",
    "he_count": "int64",
    "hf_count": "int64",
    "em_energy": "float64",
    "had_energy": "float64",
    "total_energy": "float64",
}

REQUIRED_BRANCHES = (SIZE_BRANCH,) + tuple(TOWER_BRANCHES.values())
