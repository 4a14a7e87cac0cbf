"""
Default Knowledge Tables

The static lexicon, pattern taxonomy, driver definitions and modifier
word lists the engine ships with. This is data, not logic: the pipeline
never mutates it and receives it through knowledge.KnowledgeBase.

Multi-word markers and modifiers are written with underscores
("my_fault", "kind_of") and are matched against consecutive tokens.

To use a different knowledge base, point COGNITIVE_INSIGHT_KB_PATH at a
JSON document with the same top-level keys as DEFAULT_KNOWLEDGE below.
"""

from __future__ import annotations


# ============================================================
# TIERED LEXICON
# ============================================================

LEXICON: dict[str, dict] = {
    # --- Absolutist thinking ---
    "always": {
        "category": "absolutist",
        "subcategory": "temporal_absolutism",
        "weight": 2.5,
        "intensity": "high",
        "contradicts": ["sometimes", "occasionally", "rarely"],
        "reinforces": ["never", "every", "everyone"],
        "emotional_valence": -0.3,
        "clinical_note": "Rigid temporal generalization",
    },
    "never": {
        "category": "absolutist",
        "subcategory": "temporal_absolutism",
        "weight": 2.5,
        "intensity": "high",
        "contradicts": ["sometimes", "often", "usually"],
        "reinforces": ["always", "nobody", "nothing"],
        "emotional_valence": -0.4,
        "clinical_note": "Pessimistic universal negation",
    },
    "everything": {
        "category": "absolutist",
        "subcategory": "binary_thinking",
        "weight": 2.2,
        "intensity": "high",
        "contradicts": ["some", "few", "partial"],
        "reinforces": ["nothing", "all", "completely"],
        "emotional_valence": -0.2,
        "clinical_note": "Overgeneralization tendency",
    },
    "nothing": {
        "category": "absolutist",
        "subcategory": "binary_thinking",
        "weight": 2.4,
        "intensity": "high",
        "contradicts": ["something", "anything"],
        "reinforces": ["everything", "all"],
        "emotional_valence": -0.5,
        "clinical_note": "Hopelessness indicator",
    },
    "everyone": {
        "category": "absolutist",
        "subcategory": "binary_thinking",
        "weight": 2.0,
        "intensity": "moderate",
        "contradicts": ["some", "few"],
        "reinforces": ["always", "nobody"],
        "emotional_valence": -0.2,
        "clinical_note": "Universal social generalization",
    },
    "nobody": {
        "category": "absolutist",
        "subcategory": "binary_thinking",
        "weight": 2.3,
        "intensity": "high",
        "contradicts": ["someone", "somebody"],
        "reinforces": ["never", "nothing"],
        "emotional_valence": -0.6,
        "clinical_note": "Isolating universal negation",
    },

    # --- Imperative / control ---
    "should": {
        "category": "imperative",
        "weight": 3.0,
        "intensity": "moderate",
        "context_required": True,
        "valid_contexts": {
            "i_should": {"weight": 4.0, "subcategory": "self_directed"},
            "you_should": {"weight": 2.5, "subcategory": "other_directed"},
            "should_have": {"weight": 5.0, "subcategory": "regret_focus"},
            "should_not": {"weight": 3.5, "subcategory": "prohibitive"},
        },
        "emotional_valence": -0.6,
        "clinical_note": "Internalized expectations",
    },
    "must": {
        "category": "imperative",
        "weight": 3.5,
        "intensity": "high",
        "emotional_valence": -0.7,
        "clinical_note": "High pressure self-talk",
    },
    "have_to": {
        "category": "imperative",
        "weight": 2.8,
        "intensity": "moderate",
        "context_required": True,
        "valid_contexts": {
            "i_have_to": {"weight": 3.2, "subcategory": "self_directed"},
        },
        "emotional_valence": -0.5,
        "clinical_note": "Perceived obligations",
    },

    # --- Catastrophizing ---
    "disaster": {
        "category": "catastrophizing",
        "weight": 4.0,
        "intensity": "high",
        "reinforces": ["terrible", "worst", "horrible"],
        "emotional_valence": -0.9,
        "clinical_note": "Extreme negative forecasting",
    },
    "terrible": {
        "category": "catastrophizing",
        "weight": 3.2,
        "intensity": "high",
        "reinforces": ["awful", "horrible", "disaster"],
        "emotional_valence": -0.8,
        "clinical_note": "Magnified negative appraisal",
    },
    "worst": {
        "category": "catastrophizing",
        "weight": 3.5,
        "intensity": "high",
        "contradicts": ["best", "good", "okay"],
        "emotional_valence": -0.7,
        "clinical_note": "Comparative extreme thinking",
    },
    "ruined": {
        "category": "catastrophizing",
        "weight": 3.4,
        "intensity": "high",
        "reinforces": ["disaster", "worst"],
        "emotional_valence": -0.8,
        "clinical_note": "Irreversible-outcome framing",
    },
    "awful": {
        "category": "catastrophizing",
        "weight": 3.0,
        "intensity": "moderate",
        "reinforces": ["terrible", "horrible"],
        "emotional_valence": -0.7,
        "clinical_note": "Magnified negative appraisal",
    },

    # --- Self-criticism ---
    "failure": {
        "category": "self_critic",
        "weight": 3.8,
        "intensity": "high",
        "reinforces": ["useless", "incompetent", "worthless"],
        "emotional_valence": -0.8,
        "clinical_note": "Global negative self-assessment",
    },
    "stupid": {
        "category": "self_critic",
        "weight": 3.0,
        "intensity": "moderate",
        "reinforces": ["dumb", "idiot", "foolish"],
        "emotional_valence": -0.7,
        "clinical_note": "Cognitive self-criticism",
    },
    "useless": {
        "category": "self_critic",
        "weight": 3.5,
        "intensity": "high",
        "reinforces": ["worthless", "hopeless", "pointless"],
        "emotional_valence": -0.8,
        "clinical_note": "Worth-based self-criticism",
    },
    "worthless": {
        "category": "self_critic",
        "weight": 3.9,
        "intensity": "high",
        "reinforces": ["useless", "failure"],
        "emotional_valence": -0.9,
        "clinical_note": "Worth-based self-criticism",
    },
    "incompetent": {
        "category": "self_critic",
        "weight": 3.3,
        "intensity": "moderate",
        "reinforces": ["failure", "stupid"],
        "emotional_valence": -0.7,
        "clinical_note": "Competence-based self-criticism",
    },

    # --- Personalization ---
    "my_fault": {
        "category": "personalization",
        "weight": 4.0,
        "intensity": "high",
        "emotional_valence": -0.7,
        "clinical_note": "Excessive self-blame attribution",
    },
    "because_of_me": {
        "category": "personalization",
        "weight": 3.5,
        "intensity": "moderate",
        "emotional_valence": -0.6,
        "clinical_note": "Causal self-attribution",
    },

    # --- Mind reading ---
    "they_think": {
        "category": "mind_reading",
        "weight": 2.5,
        "intensity": "moderate",
        "emotional_valence": -0.4,
        "clinical_note": "Assuming others' thoughts",
    },
    "probably_thinks": {
        "category": "mind_reading",
        "weight": 2.2,
        "intensity": "moderate",
        "emotional_valence": -0.3,
        "clinical_note": "Speculative mind reading",
    },

    # --- Emotional reasoning ---
    "feel_like": {
        "category": "emotional_reasoning",
        "weight": 2.0,
        "intensity": "low",
        "emotional_valence": -0.2,
        "clinical_note": "Emotion-as-evidence thinking",
    },

    # --- Flexible thinking (counterweight to absolutism) ---
    "sometimes": {
        "category": "flexible_thinking",
        "subcategory": "temporal_qualification",
        "weight": 1.5,
        "intensity": "low",
        "contradicts": ["always", "never"],
        "emotional_valence": 0.2,
        "clinical_note": "Graded temporal framing",
    },
    "occasionally": {
        "category": "flexible_thinking",
        "subcategory": "temporal_qualification",
        "weight": 1.4,
        "intensity": "low",
        "contradicts": ["always", "never"],
        "emotional_valence": 0.2,
        "clinical_note": "Graded temporal framing",
    },
    "usually": {
        "category": "flexible_thinking",
        "subcategory": "temporal_qualification",
        "weight": 1.2,
        "intensity": "low",
        "contradicts": ["never"],
        "emotional_valence": 0.1,
        "clinical_note": "Probabilistic framing",
    },
}


# ============================================================
# COGNITIVE PATTERN TAXONOMY
# ============================================================

PATTERNS: dict[str, dict] = {
    "absolutist": {
        "name": "All-or-Nothing Thinking",
        "driver": "control",
        "severity_threshold": 3,
        "weight_multiplier": 1.2,
        "sub_patterns": {
            "temporal_absolutism": ["always", "never", "forever", "constantly"],
            "binary_thinking": ["everything", "nothing", "everyone", "nobody"],
        },
        "contradicts": "flexible_thinking",
        "clinical_correlation": "Dichotomous reasoning (Beck, 1976)",
        "mitigation_strategy": "Practice gradient thinking: 'Sometimes X happens when Y'",
    },
    "imperative": {
        "name": "Imperative Thinking",
        "driver": "validation",
        "severity_threshold": 2,
        "weight_multiplier": 1.3,
        "sub_patterns": {
            "self_imperative": ["should", "must", "have_to"],
            "regret_focus": ["should_have"],
        },
        "clinical_correlation": "Internalized 'shoulds' (Ellis, 1957)",
        "mitigation_strategy": "Replace 'should' with 'could' or 'prefer'",
    },
    "catastrophizing": {
        "name": "Catastrophic Thinking",
        "driver": "safety",
        "severity_threshold": 2,
        "weight_multiplier": 1.5,
        "markers": ["disaster", "terrible", "worst", "ruined", "awful"],
        "clinical_correlation": "Probability overestimation of negative outcomes",
        "mitigation_strategy": "Reality testing: 'What's the actual probability?'",
    },
    "self_critic": {
        "name": "Self-Critical Thinking",
        "driver": "validation",
        "severity_threshold": 2,
        "weight_multiplier": 1.4,
        "markers": ["failure", "stupid", "useless", "incompetent", "worthless"],
        "contradicts": "self_compassion",
        "clinical_correlation": "Negative self-schema reinforcement",
        "mitigation_strategy": "Self-compassion practice: 'What would I say to a friend?'",
    },
    "personalization": {
        "name": "Personalization",
        "driver": "responsibility",
        "severity_threshold": 1,
        "weight_multiplier": 1.3,
        "markers": ["my_fault", "because_of_me"],
        "contradicts": "externalization",
        "clinical_correlation": "Excessive self-attribution for external events",
        "mitigation_strategy": "External attribution: 'What other factors contributed?'",
    },
    "mind_reading": {
        "name": "Mind Reading",
        "driver": "validation",
        "severity_threshold": 2,
        "weight_multiplier": 1.1,
        "markers": ["they_think", "probably_thinks"],
        "clinical_correlation": "Assumption of negative evaluation by others",
        "mitigation_strategy": "Behavioral experiment: 'Test if your assumption is true'",
    },
    "emotional_reasoning": {
        "name": "Emotional Reasoning",
        # No "certainty" driver is defined; this pattern contributes no driver.
        "driver": "certainty",
        "severity_threshold": 2,
        "weight_multiplier": 1.1,
        "markers": ["feel_like"],
        "clinical_correlation": "Mistaking feelings for facts (Beck, 1979)",
        "mitigation_strategy": "Separate feeling from fact",
    },
    "flexible_thinking": {
        "name": "Flexible Thinking",
        "driver": "flexibility",
        "severity_threshold": 3,
        "weight_multiplier": 1.0,
        "markers": ["sometimes", "occasionally", "usually"],
        "contradicts": "absolutist",
        "clinical_correlation": "Graded appraisal of events",
        "mitigation_strategy": "Keep using graded language",
    },
}


# ============================================================
# CORE PSYCHOLOGICAL DRIVERS
# ============================================================

DRIVERS: dict[str, dict] = {
    "control": {
        "name": "Control & Certainty",
        "root": "Security/Predictability",
        "insight": "Absolute language often reflects attempts to impose order on uncertain situations.",
        "healthy_expression": "Structured goal-setting, preparation",
        "unhealthy_expression": "Paralysis from over-planning, intolerance of ambiguity",
        "therapeutic_direction": "Acceptance of uncertainty, flexible thinking",
        "conflicts_with": ["acceptance", "flexibility"],
    },
    "validation": {
        "name": "Validation & Worth",
        "root": "Social Worth/Acceptance",
        "insight": "Imperative and self-critical language may indicate internalized external standards.",
        "healthy_expression": "Self-validation, healthy feedback seeking",
        "unhealthy_expression": "Codependency, imposter syndrome, chronic self-doubt",
        "therapeutic_direction": "Intrinsic self-worth, boundary setting",
        "conflicts_with": ["autonomy", "self_compassion"],
    },
    "safety": {
        "name": "Safety & Protection",
        "root": "Threat Avoidance/Security",
        "insight": "Catastrophic thinking often reflects underlying safety concerns and threat detection.",
        "healthy_expression": "Appropriate caution, risk assessment",
        "unhealthy_expression": "Chronic worry, avoidance behaviors, threat magnification",
        "therapeutic_direction": "Risk recalibration, exposure, safety behaviors examination",
        "conflicts_with": ["exploration", "growth"],
    },
    "responsibility": {
        "name": "Responsibility & Agency",
        "root": "Moral Accountability/Causality",
        "insight": "Personalization suggests an exaggerated sense of personal responsibility.",
        "healthy_expression": "Appropriate accountability, ethical action",
        "unhealthy_expression": "Excessive guilt, martyr complex, burnout",
        "therapeutic_direction": "Realistic responsibility boundaries, shared accountability",
        "conflicts_with": ["self_compassion", "delegation"],
    },
    "autonomy": {
        "name": "Autonomy & Self-Determination",
        "root": "Self-Governance/Independence",
        "insight": "Language emphasizing independence suggests need for self-governance.",
        "healthy_expression": "Healthy boundaries, self-direction",
        "unhealthy_expression": "Isolation, difficulty with interdependence",
        "therapeutic_direction": "Balanced autonomy with connection",
        "conflicts_with": ["connection", "compliance"],
    },
    "flexibility": {
        "name": "Flexibility & Acceptance",
        "root": "Adaptability/Openness",
        "insight": "Graded language suggests tolerance for ambiguity.",
        "healthy_expression": "Adaptive appraisal, openness to revision",
        "unhealthy_expression": "Chronic indecision, avoidance of commitment",
        "therapeutic_direction": "Anchor flexibility in stated values",
        "conflicts_with": ["control"],
    },
}


# ============================================================
# PATTERN RELATIONSHIPS
# ============================================================

PATTERN_RELATIONSHIPS: dict[str, dict] = {
    "absolutist": {
        "reinforces": ["catastrophizing", "imperative", "self_critic"],
        "conflicts_with": ["uncertainty_tolerance", "flexible_thinking"],
    },
    "self_critic": {
        "reinforces": ["personalization", "imperative"],
    },
    "catastrophizing": {
        "reinforces": ["anxiety", "avoidance"],
    },
    "imperative": {
        "reinforces": ["self_critic", "guilt"],
    },
    "flexible_thinking": {
        "conflicts_with": ["absolutist"],
    },
}


# ============================================================
# MODIFIERS & NEGATION
# ============================================================

AMPLIFIERS: dict[str, list[str]] = {
    "extreme": ["very", "extremely", "completely", "totally", "utterly", "absolutely"],
    "moderate": ["really", "quite", "particularly", "especially"],
    "emotional": ["horribly", "terribly", "awfully", "dreadfully"],
}

DIMINISHERS: dict[str, list[str]] = {
    "uncertainty": ["somewhat", "kind_of", "a_bit", "slightly", "maybe", "perhaps"],
    "qualification": ["almost", "nearly", "practically", "virtually"],
    "minimization": ["just", "only", "merely", "simply"],
}

NEGATION_PATTERNS: dict[str, list[str]] = {
    "hard_negation": ["not", "never", "no", "don't", "won't", "can't", "isn't", "wasn't"],
    "soft_negation": ["barely", "hardly", "scarcely", "rarely", "seldom"],
    "conditional_negation": ["unless", "except", "but", "however", "although"],
}


# ============================================================
# CONFIDENCE PRIORS
# ============================================================

# Share of typical texts expected to show each pattern / driver.
PRIORS: dict[str, dict[str, float]] = {
    "patterns": {
        "absolutist": 0.15,
        "imperative": 0.25,
        "catastrophizing": 0.10,
        "self_critic": 0.20,
        "personalization": 0.08,
        "mind_reading": 0.12,
        "emotional_reasoning": 0.18,
        "flexible_thinking": 0.20,
    },
    "drivers": {
        "control": 0.30,
        "validation": 0.35,
        "safety": 0.25,
        "responsibility": 0.15,
        "autonomy": 0.20,
        "flexibility": 0.20,
    },
}


DEFAULT_KNOWLEDGE: dict = {
    "lexicon": LEXICON,
    "patterns": PATTERNS,
    "drivers": DRIVERS,
    "pattern_relationships": PATTERN_RELATIONSHIPS,
    "amplifiers": AMPLIFIERS,
    "diminishers": DIMINISHERS,
    "negation_patterns": NEGATION_PATTERNS,
    "priors": PRIORS,
}
