"""Tests for card API endpoints."""

import httpx
import pytest
from factories import FakeClock, make_print, search_response
from httpx import ASGITransport, AsyncClient

from setgrouper.api.dependencies import get_card_cache, get_http_client
from setgrouper.db.storage import MemoryCacheStorage
from setgrouper.main import app
from setgrouper.services.card_cache import CardCache

PRINTS = {
    "Sol Ring": [
        make_print("Sol Ring", "Commander Masters", usd="1.50", color_identity=[]),
        make_print("Sol Ring", "Secret Lair Drop", usd="12.00", color_identity=[]),
    ],
    "Birds of Paradise": [make_print("Birds of Paradise", "Secret Lair Drop", usd="0.80")],
    "Forest": [make_print("Forest", "Foundations", usd=None)],
}


def scryfall_handler(request: httpx.Request) -> httpx.Response:
    name = request.url.params["q"][2:-1]
    if name not in PRINTS:
        return httpx.Response(404, json={"object": "error", "status": 404})
    return httpx.Response(200, json=search_response(*PRINTS[name]))


@pytest.fixture
def card_cache() -> CardCache:
    return CardCache(MemoryCacheStorage(), clock=FakeClock())


@pytest.fixture
async def client(card_cache: CardCache):
    """Provide an async test client backed by an in-memory cache and a fake Scryfall."""
    scryfall_client = httpx.AsyncClient(transport=httpx.MockTransport(scryfall_handler))

    app.dependency_overrides[get_card_cache] = lambda: card_cache
    app.dependency_overrides[get_http_client] = lambda: scryfall_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    await scryfall_client.aclose()


def card(name: str, price: float, **extra) -> dict:
    return {"name": name, "colors": [], "image_url": "", "price": price, **extra}


@pytest.fixture
def groups_payload() -> list[dict]:
    return [
        {
            "set_name": "Secret Lair Drop",
            "cards": [card("Sol Ring", 12.0), card("Birds of Paradise", 0.8)],
        },
        {"set_name": "Commander Masters", "cards": [card("Sol Ring", 1.5)]},
    ]


class TestParse:
    async def test_parses_deck_list(self, client: AsyncClient, sample_deck_list: str) -> None:
        response = await client.post("/cards/parse", json={"text": sample_deck_list})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 6
        assert data["names"][:3] == ["Evolving Wilds", "Birds of Paradise", "Fire // Ice"]

    async def test_empty_text(self, client: AsyncClient) -> None:
        response = await client.post("/cards/parse", json={"text": ""})

        assert response.status_code == 200
        assert response.json() == {"names": [], "count": 0}

    async def test_rejects_non_string_text(self, client: AsyncClient) -> None:
        response = await client.post("/cards/parse", json={"text": ["1 Sol Ring"]})

        assert response.status_code == 422


class TestResolveSets:
    async def test_groups_cards_by_set(self, client: AsyncClient) -> None:
        response = await client.post(
            "/cards/sets", json={"text": "1 Sol Ring (CMM) 400\n1 Birds of Paradise"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["requested"] == 2
        assert [g["set_name"] for g in data["groups"]] == ["Secret Lair Drop", "Commander Masters"]
        sld = data["groups"][0]["cards"]
        assert [c["name"] for c in sld] == ["Sol Ring", "Birds of Paradise"]
        assert sld[0]["price_category"] == "high"
        assert sld[1]["price_category"] == "low"
        assert sld[1]["colors"] == ["G"]

    async def test_unresolvable_names_are_left_out(self, client: AsyncClient) -> None:
        response = await client.post("/cards/sets", json={"text": "1 Not A Card\n1 Sol Ring"})

        assert response.status_code == 200
        data = response.json()
        assert data["requested"] == 2
        assert {c["name"] for g in data["groups"] for c in g["cards"]} == {"Sol Ring"}

    async def test_zero_price_override(self, client: AsyncClient) -> None:
        excluded = await client.post("/cards/sets", json={"text": "20 Forest"})
        included = await client.post(
            "/cards/sets", json={"text": "20 Forest", "exclude_zero_price": False}
        )

        assert excluded.json()["groups"] == []
        groups = included.json()["groups"]
        assert groups[0]["set_name"] == "Foundations"
        assert groups[0]["cards"][0]["price"] == 0.0

    async def test_results_are_cached(self, client: AsyncClient, card_cache: CardCache) -> None:
        await client.post("/cards/sets", json={"text": "1 Sol Ring"})

        assert await card_cache.get_all_keys() == ["card_Sol Ring"]

    @pytest.mark.parametrize("text", ["", "Deck\n// nothing here\nSideboard"])
    async def test_rejects_deck_without_cards(self, client: AsyncClient, text: str) -> None:
        response = await client.post("/cards/sets", json={"text": text})

        assert response.status_code == 400
        assert response.json()["detail"] == "Please enter valid card names"


class TestView:
    async def test_default_view(self, client: AsyncClient, groups_payload: list[dict]) -> None:
        response = await client.post("/cards/view", json={"groups": groups_payload})

        assert response.status_code == 200
        groups = response.json()["groups"]
        assert [(g["set_name"], g["selected_count"], g["total_count"]) for g in groups] == [
            ("Secret Lair Drop", 2, 2),
            ("Commander Masters", 1, 1),
        ]
        assert all(c["selected"] for g in groups for c in g["cards"])

    async def test_deselect_and_filter(
        self, client: AsyncClient, groups_payload: list[dict]
    ) -> None:
        response = await client.post(
            "/cards/view",
            json={
                "groups": groups_payload,
                "deselected": ["Sol Ring"],
                "price_categories": ["low", "mid"],
            },
        )

        groups = response.json()["groups"]
        assert [(g["set_name"], g["selected_count"], g["total_count"]) for g in groups] == [
            ("Secret Lair Drop", 1, 1),
            ("Commander Masters", 0, 1),
        ]
        assert groups[1]["cards"][0]["selected"] is False

    async def test_price_category_is_derived(self, client: AsyncClient) -> None:
        """A client-supplied category never overrides the one derived from price."""
        response = await client.post(
            "/cards/view",
            json={
                "groups": [
                    {"set_name": "Alpha", "cards": [card("Forest", 0.5, price_category="high")]}
                ],
                "price_categories": ["high"],
            },
        )

        assert response.json()["groups"] == []

    async def test_rejects_unknown_category(
        self, client: AsyncClient, groups_payload: list[dict]
    ) -> None:
        response = await client.post(
            "/cards/view", json={"groups": groups_payload, "price_categories": ["cheap"]}
        )

        assert response.status_code == 422


class TestExport:
    async def test_exports_selected_cards(
        self, client: AsyncClient, groups_payload: list[dict]
    ) -> None:
        response = await client.post(
            "/cards/export", json={"groups": groups_payload, "deselected": ["Birds of Paradise"]}
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="mtg_set_groups.csv"' in response.headers["content-disposition"]
        assert response.text == "Set,Cards\nSecret Lair Drop,Sol Ring\nCommander Masters,Sol Ring\n"

    async def test_fully_deselected_sets_are_not_exported(
        self, client: AsyncClient, groups_payload: list[dict]
    ) -> None:
        response = await client.post(
            "/cards/export", json={"groups": groups_payload, "deselected": ["Sol Ring"]}
        )

        assert response.text == "Set,Cards\nSecret Lair Drop,Birds of Paradise\n"
