# src/config/domains.py — v1
"""Declarative domain table for the neuropsychological report.

Each entry becomes one DomainSpec in the DomainRegistry. Section ordinals
fix the position of a domain's artifacts in the assembled report; labels
are the exact strings found in the ``domain`` column of the source data.
"""

from __future__ import annotations

from typing import Any

# Data source handles. Each maps to data/<source>.parquet or .csv.
NEUROCOG = "neurocog"
NEUROBEHAV = "neurobehav"
VALIDITY = "validity"

DOMAIN_TABLE: list[dict[str, Any]] = [
    {
        "key": "iq",
        "section_ordinal": 1,
        "labels": ["General Cognitive Ability"],
        "data_source": NEUROCOG,
    },
    {
        "key": "academics",
        "section_ordinal": 2,
        "labels": ["Academic Skills"],
        "data_source": NEUROCOG,
    },
    {
        "key": "verbal",
        "section_ordinal": 3,
        "labels": ["Verbal/Language"],
        "data_source": NEUROCOG,
    },
    {
        "key": "spatial",
        "section_ordinal": 4,
        "labels": ["Visual Perception/Construction"],
        "data_source": NEUROCOG,
    },
    {
        "key": "memory",
        "section_ordinal": 5,
        "labels": ["Memory"],
        "data_source": NEUROCOG,
    },
    {
        "key": "executive",
        "section_ordinal": 6,
        "labels": ["Attention/Executive"],
        "data_source": NEUROCOG,
    },
    {
        "key": "motor",
        "section_ordinal": 7,
        "labels": ["Motor"],
        "data_source": NEUROCOG,
    },
    {
        "key": "social",
        "section_ordinal": 8,
        "labels": ["Social Cognition"],
        "data_source": NEUROCOG,
    },
    {
        "key": "adhd",
        "section_ordinal": 9,
        "labels": ["ADHD"],
        "data_source": NEUROBEHAV,
        "rater_capable": True,
    },
    {
        "key": "emotion",
        "section_ordinal": 10,
        "labels": [
            "Emotional/Behavioral/Personality",
            "Behavioral/Emotional/Social",
            "Substance Use",
            "Psychosocial Problems",
            "Psychiatric Disorders",
            "Personality Disorders",
        ],
        "data_source": NEUROBEHAV,
        "rater_capable": True,
    },
    {
        "key": "adaptive",
        "section_ordinal": 11,
        "labels": ["Adaptive Functioning"],
        "data_source": NEUROBEHAV,
    },
    {
        "key": "daily_living",
        "section_ordinal": 12,
        "labels": ["Daily Living"],
        "data_source": NEUROCOG,
    },
    {
        "key": "validity",
        "section_ordinal": 13,
        "labels": ["Performance Validity", "Symptom Validity"],
        "data_source": VALIDITY,
    },
]
