# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Deterministic structured helpers built on the disaster and region catalogs.

Plans, checklists, classification, routing and query parsing all use
plain keyword matching; none of them needs a generative backend.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from safeseasons.ask.types import AskContext
from safeseasons.catalog.disasters import Disaster, DisasterCatalog, load_disaster_catalog
from safeseasons.catalog.regions import MONTHS, HazardCatalog, Region, load_hazard_catalog

DEFAULT_PLAN_STEPS = [
    "Create emergency kit",
    "Develop evacuation plan",
    "Stay informed",
    "Secure property",
    "Know evacuation routes",
]
DEFAULT_PLAN_SUPPLIES = ["Water", "Non-perishable food", "First aid kit", "Flashlight", "Batteries"]

# Checked in order; the first keyword found decides the disaster type.
DISASTER_KEYWORDS = (
    ("tornado", "tornado"),
    ("hurricane", "hurricane"),
    ("flood", "flood"),
    ("wildfire", "wildfire"),
    ("earthquake", "earthquake"),
    ("blizzard", "blizzard"),
    ("snow", "blizzard"),
)


@dataclass
class PreparednessPlan:
    disaster_type: str
    steps: List[str]
    supplies: List[str]
    urgency: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChecklistEntry:
    name: str
    priority: str
    reason: str


@dataclass
class QuestionClassification:
    disaster_type: Optional[str]
    mentioned_region: Optional[str]
    urgency: str


@dataclass
class QuestionRoute:
    category: str
    confidence: float = 0.7
    suggested_data: Optional[str] = None


@dataclass
class QueryExtraction:
    mentioned_region: Optional[str]
    mentioned_disaster: Optional[str]
    time_reference: Optional[str]
    question_type: str


@dataclass
class PreparednessQuery:
    disaster_type: Optional[str]
    region: Optional[str]
    month: Optional[str]
    query_type: str


@dataclass
class PrioritizedAction:
    step: str
    priority: str
    estimated_time: Optional[str] = None


@dataclass
class PrioritizedActions:
    actions: List[PrioritizedAction] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _contains_any(text: str, words: tuple) -> bool:
    return any(w in text for w in words)


class RuleBasedExtendedFeatures:
    def __init__(self, disasters: Optional[DisasterCatalog] = None, regions: Optional[HazardCatalog] = None):
        self.disasters = disasters if disasters is not None else load_disaster_catalog()
        self.regions = regions if regions is not None else load_hazard_catalog()

    # -- helpers ----------------------------------------------------------------

    def mentioned_region(self, question: str) -> Optional[Region]:
        """Region named in ``question``, else the first whose code appears.

        The longest matching name wins ("West Virginia" over "Virginia").
        Codes only count when written in capitals ("TX"), since many of them
        ("in", "or", "me", "ok") are everyday words.
        """

        text = question or ""
        lowered = text.lower()
        regions = self.regions.all_regions()
        named = [r for r in regions if r.name.lower() in lowered]
        if named:
            return max(named, key=lambda r: len(r.name))
        for region in regions:
            if re.search(rf"\b{re.escape(region.code)}\b", text):
                return region
        return None

    def _mentioned_disaster(self, question: str) -> Optional[Disaster]:
        return self.disasters.mentioned_in(question)

    # -- guided generation ---------------------------------------------------------

    def preparedness_plan(self, question: str, context: Optional[AskContext] = None) -> PreparednessPlan:
        disaster = self._mentioned_disaster(question)
        if disaster is not None and disaster.steps:
            return PreparednessPlan(
                disaster_type=disaster.name,
                steps=list(disaster.steps[:5]),
                supplies=list(disaster.supplies[:5]),
                urgency="High",
            )
        return PreparednessPlan(
            disaster_type="General",
            steps=list(DEFAULT_PLAN_STEPS),
            supplies=list(DEFAULT_PLAN_SUPPLIES),
            urgency="Moderate",
        )

    def personalized_checklist(self, disaster: str, region: str, profile: str) -> List[ChecklistEntry]:
        items = [
            ChecklistEntry("Water (1 gallon per person per day)", "critical", "Essential for survival"),
            ChecklistEntry("Non-perishable food (3-day supply)", "critical", "Sustains you during emergencies"),
            ChecklistEntry("First aid kit", "high", "Treat injuries immediately"),
            ChecklistEntry("Flashlight and batteries", "high", "Light during power outages"),
            ChecklistEntry("Important documents", "high", "Identity and insurance proof"),
        ]
        lowered = (profile or "").lower()
        if "pet" in lowered:
            items.append(ChecklistEntry("Pet food and supplies", "high", "Care for your pets"))
        if "medical" in lowered or "elderly" in lowered:
            items.append(
                ChecklistEntry("Prescription medications (7-day supply)", "critical", "Maintain health")
            )
        return items

    # -- tagging ------------------------------------------------------------

    def classify_question(self, question: str) -> QuestionClassification:
        q = (question or "").lower()
        disaster_type = next((kind for word, kind in DISASTER_KEYWORDS if word in q), None)
        region = self.mentioned_region(question)

        if _contains_any(q, ("emergency", "urgent", "now")):
            urgency = "emergency"
        elif _contains_any(q, ("soon", "prepare")):
            urgency = "high"
        elif _contains_any(q, ("plan", "future")):
            urgency = "moderate"
        else:
            urgency = "low"
        return QuestionClassification(
            disaster_type=disaster_type,
            mentioned_region=region.name if region else None,
            urgency=urgency,
        )

    def route_question(self, question: str) -> QuestionRoute:
        q = (question or "").lower()
        if _contains_any(q, ("suppl", "kit", "item")):
            return QuestionRoute("supplies")
        if _contains_any(q, ("evacuat", "leave", "go")):
            return QuestionRoute("evacuation")
        if _contains_any(q, ("state", "location", "where")):
            region = self.mentioned_region(question)
            return QuestionRoute("state", suggested_data=region.name if region else None)
        disaster = self._mentioned_disaster(q)
        if disaster is not None:
            return QuestionRoute("disaster", suggested_data=disaster.name)
        return QuestionRoute("general")

    def extract_query_info(self, question: str) -> QueryExtraction:
        q = (question or "").strip().lower()
        region = self.mentioned_region(question)
        disaster = self._mentioned_disaster(q)

        if "this month" in q or "current" in q:
            time_reference: Optional[str] = "this month"
        elif "next week" in q:
            time_reference = "next week"
        else:
            time_reference = None

        if q.startswith("how") or "how to" in q:
            question_type = "how-to"
        elif q.startswith("what"):
            question_type = "what-is"
        elif q.startswith("when"):
            question_type = "when"
        elif q.startswith("where"):
            question_type = "where"
        else:
            question_type = "general"
        return QueryExtraction(
            mentioned_region=region.name if region else None,
            mentioned_disaster=disaster.name if disaster else None,
            time_reference=time_reference,
            question_type=question_type,
        )

    def parse_query(self, question: str) -> PreparednessQuery:
        q = (question or "").lower()
        disaster = self._mentioned_disaster(q)
        region = self.mentioned_region(question)
        month = next((name for name in MONTHS if name.lower() in q), None)

        if _contains_any(q, ("tip", "advice")):
            query_type = "tips"
        elif _contains_any(q, ("suppl", "kit")):
            query_type = "supplies"
        elif _contains_any(q, ("step", "do")):
            query_type = "steps"
        elif _contains_any(q, ("risk", "danger")):
            query_type = "risks"
        else:
            query_type = "tips"
        return PreparednessQuery(
            disaster_type=disaster.name if disaster else None,
            region=region.name if region else None,
            month=month,
            query_type=query_type,
        )

    # -- summaries ----------------------------------------------------------------

    def summarize_disaster(self, disaster: Disaster) -> str:
        steps = ", ".join(disaster.steps[:3])
        return f"{disaster.name}: {disaster.description[:100]}. Key steps: {steps}."

    def summarize_steps(self, steps: List[str]) -> str:
        if not steps:
            return "No steps provided."
        return f"Key steps: {', '.join(steps[:3])}."

    def prioritize_actions(self, disaster_name: str, situation: str = "") -> PrioritizedActions:
        disaster = self.disasters.disaster(disaster_name)
        if disaster is None:
            return PrioritizedActions([
                PrioritizedAction("Call 911 in emergencies", "immediate", "1 minute"),
                PrioritizedAction("Evacuate if ordered", "immediate", "5 minutes"),
                PrioritizedAction("Grab emergency kit", "urgent", "2 minutes"),
                PrioritizedAction("Stay informed", "important"),
                PrioritizedAction("Follow official guidance", "important"),
            ])

        actions = [
            PrioritizedAction("Call 911 if immediate danger", "immediate", "1 minute"),
            PrioritizedAction("Evacuate if ordered", "immediate", "5 minutes"),
            PrioritizedAction("Grab emergency kit", "urgent", "2 minutes"),
        ]
        for index, step in enumerate(disaster.steps[:3]):
            actions.append(PrioritizedAction(step, "important" if index < 2 else "preparatory"))
        return PrioritizedActions(actions)
