"""
Supplement catalog taxonomy.

Three orthogonal dimensions describe every catalog entry:
  - ``TargetArea``      - the *why*:  which goal or body system it supports.
  - ``SubstanceClass``  - the *what*: which kind of substance it is.
  - ``IndicationBasis`` - the *how*:  which data the indication rests on.

A candidate carries one or more target areas but exactly one substance class
and one indication basis.

Usage example::

    from supplement_recommender.taxonomy.supplement_taxonomy import TargetArea

    area = TargetArea.SLEEP_STRESS

This module has NO imports from any other ``supplement_recommender`` package.
"""

from enum import StrEnum


class TargetArea(StrEnum):
    """Goal or body system a supplement addresses."""

    # ── Performance ───────────────────────────────────────────────────────────
    PERFORMANCE_STRENGTH = "performance_strength"
    """Maximal strength and power output."""

    PERFORMANCE_ENDURANCE = "performance_endurance"
    """Aerobic and muscular endurance."""

    MUSCLE_PROTEIN = "muscle_protein"
    """Muscle protein synthesis and lean-mass retention."""

    RECOVERY_INFLAMMATION = "recovery_inflammation"
    """Post-training recovery and inflammation control."""

    # ── Wellbeing ─────────────────────────────────────────────────────────────
    SLEEP_STRESS = "sleep_stress"
    """Sleep quality, relaxation and stress resilience."""

    FOCUS_COGNITION = "focus_cognition"
    """Attention, alertness and cognitive performance."""

    HEALTH_IMMUNE = "health_immune"
    """General health and immune function."""

    DIGESTION_GUT = "digestion_gut"
    """Digestive comfort and gut flora."""

    JOINTS_CONNECTIVE_SKIN = "joints_connective_skin"
    """Joints, tendons, connective tissue and skin."""

    HORMONE_CYCLE = "hormone_cycle"
    """Hormonal balance and menstrual cycle support."""

    # ── Foundations ───────────────────────────────────────────────────────────
    BASE_MICRONUTRIENTS = "base_micronutrients"
    """Baseline vitamins, minerals and trace elements."""

    HYDRATION_ELECTROLYTES = "hydration_electrolytes"
    """Fluid balance and electrolyte replacement."""


class SubstanceClass(StrEnum):
    """Chemical / nutritional class of a supplement."""

    AMINO_ACID_DERIVATIVE = "amino_acid_derivative"
    PROTEIN = "protein"
    CREATINE = "creatine"
    VITAMIN = "vitamin"
    MINERAL_TRACE_ELEMENT = "mineral_trace_element"
    FATTY_ACID_OIL = "fatty_acid_oil"
    PLANT_EXTRACT = "plant_extract"
    MUSHROOM = "mushroom"
    PROBIOTIC = "probiotic"
    ELECTROLYTE_BUFFER_OSMOLYTE = "electrolyte_buffer_osmolyte"
    HORMONE_SIGNALING = "hormone_signaling"
    OTHER = "other"


class IndicationBasis(StrEnum):
    """Which kind of evidence the recommendation for a supplement rests on."""

    PROFILE = "profile"
    """Training and lifestyle profile alone."""

    NUTRITION_LAB = "nutrition_lab"
    """Nutrition tracking and/or laboratory values."""

    COMBINED = "combined"
    """Profile plus nutrition / lab data."""
