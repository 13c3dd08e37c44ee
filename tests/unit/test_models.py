"""Unit tests for Pydantic models validation."""

import pytest
from pydantic import ValidationError

from factories import make_hit, make_payload, recipe_link
from recipe_search.models.models import (
    AddFavoriteResponse,
    FavoriteRecord,
    Recipe,
    SearchPage,
    SearchResultSet,
    extract_recipe_name,
)


class TestExtractRecipeName:
    """Test display-name derivation from share links."""

    def test_strips_hash_and_title_cases(self):
        link = "http://www.edamam.com/recipe/chicken-vesuvio-b79327d05b8e5b838ad6cfd9576b30b6/chicken"
        assert extract_recipe_name(link) == "Chicken Vesuvio"

    def test_keeps_apostrophes_lowercase(self):
        link = "http://www.edamam.com/recipe/mom's-meatloaf-0123456789abcdef0123456789abcdef/meatloaf"
        assert extract_recipe_name(link) == "Mom's Meatloaf"

    def test_uses_last_segment_without_recipe_path(self):
        assert extract_recipe_name("https://example.com/dishes/beef-stew") == "Beef Stew"

    def test_falls_back_to_link(self):
        assert extract_recipe_name("https://example.com/") == "https://example.com/"


class TestRecipe:
    """Test Recipe parsing from search hits."""

    def test_from_hit_uses_share_link_as_identity(self):
        recipe = Recipe.from_hit(make_hit("lemon-chicken"))

        assert recipe.identity == recipe_link("lemon-chicken")
        assert recipe.name == "Lemon Chicken"
        assert recipe.image_ref == "https://img.example.com/lemon-chicken.jpg"

    def test_label_takes_precedence_over_link(self):
        hit = make_hit("lemon-chicken")
        hit["recipe"]["label"] = "Zesty Lemon Chicken"

        assert Recipe.from_hit(hit).name == "Zesty Lemon Chicken"

    def test_image_ref_falls_back_to_small_rendition(self):
        hit = make_hit("lemon-chicken")
        del hit["recipe"]["image"]

        assert Recipe.from_hit(hit).image_ref == "https://img.example.com/lemon-chicken-small.jpg"

    def test_missing_share_link_is_invalid(self):
        with pytest.raises(ValidationError):
            Recipe.from_hit({"recipe": {"image": "https://img.example.com/x.jpg"}})


class TestSearchPage:
    """Test SearchPage.from_payload."""

    def test_parses_hits_count_and_next_cursor(self):
        page = SearchPage.from_payload(make_payload(["a", "b"], count=50, next_href="https://api.example.com/next?_cont=1"))

        assert [r.identity for r in page.items] == [recipe_link("a"), recipe_link("b")]
        assert page.total_count == 50
        assert page.continuation_cursor == "https://api.example.com/next?_cont=1"

    def test_absent_next_link_means_no_cursor(self):
        page = SearchPage.from_payload(make_payload(["a"]))

        assert page.continuation_cursor is None

    def test_malformed_hit_is_skipped(self):
        payload = make_payload(["a", "b", "c"], count=3)
        del payload["hits"][1]["recipe"]["shareAs"]

        page = SearchPage.from_payload(payload)

        assert [r.identity for r in page.items] == [recipe_link("a"), recipe_link("c")]
        assert page.total_count == 3

    def test_empty_payload(self):
        page = SearchPage.from_payload({})

        assert page.items == []
        assert page.total_count == 0
        assert page.continuation_cursor is None


class TestSearchResultSet:
    """Test replace/append semantics."""

    def test_append_extends_items_and_replaces_cursor(self):
        results = SearchResultSet()
        results.replace(SearchPage.from_payload(make_payload(["a", "b"], count=3, next_href="u1")))
        results.append(SearchPage.from_payload(make_payload(["c"], count=3)))

        assert [r.name for r in results.items] == ["A", "B", "C"]
        assert results.total_count == 3
        assert results.has_next_page is False

    def test_replace_discards_previous_items(self):
        results = SearchResultSet()
        results.replace(SearchPage.from_payload(make_payload(["a", "b"])))
        results.replace(SearchPage.from_payload(make_payload(["c"])))

        assert [r.name for r in results.items] == ["C"]


class TestFavoriteRecord:
    """Test FavoriteRecord validation and wire format."""

    def test_parses_wire_format(self):
        record = FavoriteRecord.model_validate({"name": "Pie", "url": "https://img/pie.jpg", "link": "https://r/pie"})

        assert record.identity == "https://r/pie"
        assert record.image_ref == "https://img/pie.jpg"
        assert record.to_payload() == {"name": "Pie", "url": "https://img/pie.jpg", "link": "https://r/pie"}

    @pytest.mark.parametrize("missing", ["name", "url", "link"])
    def test_each_field_is_required(self, missing):
        entry = {"name": "Pie", "url": "https://img/pie.jpg", "link": "https://r/pie"}
        del entry[missing]

        with pytest.raises(ValidationError):
            FavoriteRecord.model_validate(entry)

    def test_blank_name_is_invalid(self):
        with pytest.raises(ValidationError):
            FavoriteRecord.model_validate({"name": "   ", "url": "https://img/pie.jpg", "link": "https://r/pie"})

    def test_records_are_immutable(self):
        record = FavoriteRecord(identity="https://r/pie", name="Pie", image_ref="https://img/pie.jpg")

        with pytest.raises(ValidationError):
            record.name = "Cake"


class TestAddFavoriteResponse:
    """Test classification of add_favorite responses."""

    def test_error_is_soft_error(self):
        response = AddFavoriteResponse.model_validate({"error": "Favorite already exists"})

        assert response.is_soft_error
        assert response.rejection_message == "Favorite already exists"

    def test_success_without_image_is_duplicate_acknowledgement(self):
        response = AddFavoriteResponse.model_validate({"success": True, "message": "Already saved"})

        assert response.is_soft_error
        assert response.rejection_message == "Already saved"

    def test_pre_signed_url_confirms(self):
        response = AddFavoriteResponse.model_validate({"success": True, "preSignedImageUrl": "https://s3/pie.jpg"})

        assert not response.is_soft_error
        assert response.pre_signed_image_url == "https://s3/pie.jpg"

    def test_empty_response_confirms(self):
        assert not AddFavoriteResponse.model_validate({}).is_soft_error
