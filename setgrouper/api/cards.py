"""
Card API endpoints.

Parse deck lists, resolve them into set groups, compute the filtered view
and export it as CSV.
"""

from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

from setgrouper.api.dependencies import get_card_cache, get_http_client
from setgrouper.models.card import CardRecord, PriceCategory, SetGroup
from setgrouper.models.selection import SelectionState
from setgrouper.parsers.deck_list import extract_card_names
from setgrouper.services.card_cache import CardCache
from setgrouper.services.card_sets import fetch_card_sets
from setgrouper.services.export import EXPORT_FILENAME, groups_to_csv
from setgrouper.services.selection import GroupView, build_view, view_to_groups

router = APIRouter(prefix="/cards", tags=["cards"])


class DeckListRequest(BaseModel):
    """Request model carrying raw deck list text."""

    text: str = Field(
        ...,
        description="Deck list, one card per line",
        examples=["1 Evolving Wilds (INR)\n2 Delighted Halfling (XYZ)"],
    )


class ParseResponse(BaseModel):
    """Response model for parsed card names."""

    names: list[str] = Field(default_factory=list)
    count: int = 0


class CardModel(BaseModel):
    """One print of a card in one set."""

    name: str
    colors: list[str] = Field(default_factory=list)
    image_url: str = ""
    price: float = Field(default=0.0, ge=0)
    price_category: PriceCategory | None = Field(
        default=None,
        description="Derived from price; ignored on input",
    )

    @classmethod
    def from_record(cls, card: CardRecord) -> "CardModel":
        return cls(
            name=card.name,
            colors=list(card.colors),
            image_url=card.image_url,
            price=card.price,
            price_category=card.price_category,
        )

    def to_record(self) -> CardRecord:
        return CardRecord(
            name=self.name,
            colors=tuple(self.colors),
            image_url=self.image_url,
            price=self.price,
        )


class SetGroupModel(BaseModel):
    """Distinct cards sharing one set."""

    set_name: str
    cards: list[CardModel] = Field(default_factory=list)

    @classmethod
    def from_group(cls, group: SetGroup) -> "SetGroupModel":
        return cls(
            set_name=group.set_name,
            cards=[CardModel.from_record(card) for card in group.cards],
        )

    def to_group(self) -> SetGroup:
        return SetGroup(set_name=self.set_name, cards=[card.to_record() for card in self.cards])


class SetsRequest(DeckListRequest):
    """Request model for resolving a deck list into set groups."""

    exclude_zero_price: bool | None = Field(
        default=None,
        description="Hide prints without a market price (server default if omitted)",
    )


class SetsResponse(BaseModel):
    """Response model for set groups, largest first."""

    requested: int
    groups: list[SetGroupModel] = Field(default_factory=list)


class SelectionRequest(BaseModel):
    """Request model for applying a selection to set groups."""

    groups: list[SetGroupModel]
    deselected: list[str] = Field(
        default_factory=list,
        description="Card names marked inactive in every set",
    )
    price_categories: list[PriceCategory] = Field(
        default_factory=lambda: list(PriceCategory),
        description="Enabled price categories",
    )

    def to_state(self) -> SelectionState:
        return SelectionState(
            deselected=frozenset(self.deselected),
            enabled_categories=frozenset(self.price_categories),
        )


class CardViewModel(CardModel):
    selected: bool = True


class GroupViewModel(BaseModel):
    """A set group as displayed."""

    set_name: str
    selected_count: int
    total_count: int
    cards: list[CardViewModel] = Field(default_factory=list)

    @classmethod
    def from_view(cls, view: GroupView) -> "GroupViewModel":
        return cls(
            set_name=view.set_name,
            selected_count=view.selected_count,
            total_count=view.total_count,
            cards=[
                CardViewModel(
                    **CardModel.from_record(card_view.card).model_dump(),
                    selected=card_view.selected,
                )
                for card_view in view.cards
            ],
        )


class ViewResponse(BaseModel):
    """Response model for the filtered view."""

    groups: list[GroupViewModel] = Field(default_factory=list)


@router.post("/parse", response_model=ParseResponse)
async def parse_deck_list(request: DeckListRequest) -> ParseResponse:
    """Extract canonical card names from a deck list."""
    names = extract_card_names(request.text)
    return ParseResponse(names=names, count=len(names))


@router.post("/sets", response_model=SetsResponse)
async def resolve_card_sets(
    request: SetsRequest,
    cache: Annotated[CardCache, Depends(get_card_cache)],
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> SetsResponse:
    """
    Resolve a deck list into set groups.

    Cards that fail to resolve are left out; see server logs for details.
    """
    names = extract_card_names(request.text)
    if not names:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please enter valid card names",
        )

    groups = await fetch_card_sets(
        names,
        cache,
        client,
        exclude_zero_price=request.exclude_zero_price,
    )

    return SetsResponse(
        requested=len(names),
        groups=[SetGroupModel.from_group(group) for group in groups],
    )


@router.post("/view", response_model=ViewResponse)
async def view_card_sets(request: SelectionRequest) -> ViewResponse:
    """Apply deselection and price filters to set groups."""
    groups = [group.to_group() for group in request.groups]
    views = build_view(groups, request.to_state())
    return ViewResponse(groups=[GroupViewModel.from_view(view) for view in views])


@router.post("/export")
async def export_card_sets(request: SelectionRequest) -> Response:
    """Export the selected cards of each visible set as CSV."""
    groups = [group.to_group() for group in request.groups]
    views = build_view(groups, request.to_state())
    content = groups_to_csv(view_to_groups(views))
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
