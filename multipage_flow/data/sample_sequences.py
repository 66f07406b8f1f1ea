from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from multipage_flow.domain.models import DecisionNode, Page, Sequence, SequenceChild

# ==============================================================================
# FORM DATA MODEL
# ==============================================================================


class PetRockRegistration(BaseModel):
    """Complete data of the pet rock registration form."""
    owner_name: str = Field(..., min_length=1)
    has_co_owners: bool = False
    co_owner_names: List[str] = Field(default_factory=list)
    rock_name: str = Field(..., min_length=1)
    rock_weight: float = Field(..., gt=0)
    is_natural_color: bool = True
    primary_color: Optional[str] = None
    demeanor: Literal["Introverted", "Extroverted", "Shy", "Energetic", "Laid-back"]
    wants_insurance: bool = True
    insurance_provider: Optional[str] = None
    policy_number: Optional[str] = None
    confirmed: bool = False


# ==============================================================================
# PAGE DEFINITIONS
# ==============================================================================

# --- OWNER ---
owner_info = Page(
    id="owner-info",
    is_complete=lambda data: bool(data.get("owner_name")),
    validate=lambda data: (
        {"owner_name": "Owner name is required."} if not data.get("owner_name") else None
    ),
)

# --- CO-OWNERS (only when the owner declared some) ---
co_ownership_info = Page(
    id="co-ownership-info",
    is_required=lambda data: bool(data.get("has_co_owners")),
    is_complete=lambda data: bool(data.get("co_owner_names"))
    and all(data["co_owner_names"]),
)

# --- ROCK DETAILS (grouped) ---
rock_identification = Page(
    id="identification",
    is_complete=lambda data: bool(data.get("rock_name")) and bool(data.get("rock_weight")),
)

rock_color = Page(
    id="color",
    # Natural rocks have nothing to declare.
    is_required=lambda data: data.get("is_natural_color") is False,
    is_complete=lambda data: bool(data.get("primary_color")),
)

rock_personality = Page(
    id="personality",
    is_complete=lambda data: bool(data.get("demeanor")),
)

rock_details = Sequence(
    id="rock",
    pages=[rock_identification, rock_color, rock_personality],
)

# --- INSURANCE ROUTING ---
coverage_check = DecisionNode(
    id="coverage-check",
    select_next_page=lambda data: "review" if data.get("wants_insurance") is False else None,
)

insurance = Page(
    id="insurance",
    is_complete=lambda data: bool(data.get("insurance_provider"))
    and bool(data.get("policy_number")),
)

# --- REVIEW ---
review = Page(
    id="review",
    is_complete=lambda data: bool(data.get("confirmed")),
    is_final=lambda data: True,
)


# ==============================================================================
# SEQUENCE DEFINITIONS
# ==============================================================================

PET_ROCK_PAGES: List[SequenceChild] = [
    owner_info,
    co_ownership_info,
    rock_details,
    coverage_check,
    insurance,
    review,
]

SAMPLE_SEQUENCES = {
    "pet_rock_registration": PET_ROCK_PAGES,
}
