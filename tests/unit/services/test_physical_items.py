"""
Tests unitaires pour PhysicalItemService (operations manuelles).

Tests couvrant:
- listing filtre par format et pagine
- ajout de media (existant ou nouveau), doublon refuse
- modification des formats d'un lien
- retrait de media, dernier lien refuse
- suppression d'article (medias conserves)
- invariant d'agregation des formats apres chaque operation
"""

import pytest

from cineshelf.core.entities.collection import Media
from cineshelf.core.exceptions import (
    MediaLinkError,
    MediaLinkNotFoundError,
    MediaNotFoundError,
    PhysicalItemNotFoundError,
)
from cineshelf.core.value_objects.formats import Format, aggregate_formats
from cineshelf.infrastructure.persistence.models import MediaModel, PhysicalItemModel
from tests.fixtures.csv_samples import BTTF_CSV, MATRIX_CSV


@pytest.fixture
def collection(import_export_service, uow_factory):
    """Collection importee ; retourne les IDs utiles."""
    import_export_service.import_csv(MATRIX_CSV)
    import_export_service.import_csv(BTTF_CSV)
    with uow_factory() as uow:
        return {
            "steelbook": uow.physical_items.get_by_name("Matrix Steelbook").id,
            "dvd": uow.physical_items.get_by_name("Matrix DVD").id,
            "bttf": uow.physical_items.get_by_name("BTTF Trilogy").id,
            "matrix": uow.media.get_by_external_id(603).id,
            "alien": uow.media.get_by_external_id(348).id,
            "bttf1": uow.media.get_by_external_id(105).id,
        }


def _assert_format_invariant(details) -> None:
    expected = aggregate_formats(entry.link.formats for entry in details.media)
    assert details.item.format_set == expected


# ============================================================================
# Lecture
# ============================================================================


class TestListAndGet:
    """Tests pour list_items et get_item."""

    def test_list_all(self, physical_item_service, collection):
        page = physical_item_service.list_items()
        assert page.total == 4
        assert len(page.items) == 4
        # Tri par defaut : le plus recent d'abord
        assert page.items[0].name == "BTTF Trilogy"

    def test_filter_by_format(self, physical_item_service, collection):
        page = physical_item_service.list_items(format_filter=Format.BLU_RAY)
        assert sorted(item.name for item in page.items) == [
            "Alien Collector",
            "BTTF Trilogy",
            "Matrix Steelbook",
        ]
        assert page.total == 3

    def test_filter_without_match(self, physical_item_service, collection):
        page = physical_item_service.list_items(format_filter=Format.VHS)
        assert page.items == []
        assert page.total == 0

    def test_pagination(self, physical_item_service, collection):
        page = physical_item_service.list_items(sort_by="name", sort_order="asc", page=2, limit=3)
        assert [item.name for item in page.items] == ["Matrix Steelbook"]
        assert page.total_pages == 2

    def test_get_item_with_media(self, physical_item_service, collection):
        details = physical_item_service.get_item(collection["bttf"])
        assert details.item.name == "BTTF Trilogy"
        assert [entry.media.external_id for entry in details.media] == [105, 165]
        assert [entry.link.disc_number for entry in details.media] == [1, 2]

    def test_get_unknown_item(self, physical_item_service):
        with pytest.raises(PhysicalItemNotFoundError):
            physical_item_service.get_item(999)


# ============================================================================
# Ajout / retrait de media
# ============================================================================


class TestAddMediaLink:
    """Tests pour add_media_link."""

    def test_link_existing_media(self, physical_item_service, collection):
        details = physical_item_service.add_media_link(
            collection["bttf"], ["4K UHD"], media_id=collection["alien"], disc_number=3
        )
        assert len(details.media) == 3
        assert [fmt.value for fmt in details.item.format_set] == ["4K UHD", "Blu-ray"]
        _assert_format_invariant(details)

    def test_link_new_media(self, physical_item_service, collection, count_rows):
        details = physical_item_service.add_media_link(
            collection["dvd"], ["VHS"], new_media=Media(title="Animatrix", external_id=55931)
        )
        assert count_rows(MediaModel) == 5
        assert details.media[-1].media.title == "Animatrix"
        assert Format.VHS in details.item.format_set
        _assert_format_invariant(details)

    def test_duplicate_link_refused(self, physical_item_service, collection):
        with pytest.raises(MediaLinkError, match="deja lie"):
            physical_item_service.add_media_link(
                collection["steelbook"], ["DVD"], media_id=collection["matrix"]
            )

    def test_invalid_format_refused(self, physical_item_service, collection):
        with pytest.raises(MediaLinkError, match="Format invalide"):
            physical_item_service.add_media_link(
                collection["bttf"], ["Betamax"], media_id=collection["alien"]
            )

    def test_empty_formats_refused(self, physical_item_service, collection):
        with pytest.raises(MediaLinkError, match="Au moins un format"):
            physical_item_service.add_media_link(collection["bttf"], [], media_id=collection["alien"])

    def test_new_media_requires_title(self, physical_item_service, collection):
        with pytest.raises(MediaLinkError):
            physical_item_service.add_media_link(collection["bttf"], ["DVD"], new_media=Media(title=""))

    def test_unknown_item(self, physical_item_service, collection):
        with pytest.raises(PhysicalItemNotFoundError):
            physical_item_service.add_media_link(999, ["DVD"], media_id=collection["alien"])

    def test_unknown_media(self, physical_item_service, collection):
        with pytest.raises(MediaNotFoundError):
            physical_item_service.add_media_link(collection["bttf"], ["DVD"], media_id=999)


class TestUpdateLinkFormats:
    """Tests pour update_link_formats."""

    def test_update_recomputes_formats(self, physical_item_service, collection):
        details = physical_item_service.update_link_formats(
            collection["bttf"], collection["bttf1"], ["VHS", "DVD"]
        )

        updated = next(e for e in details.media if e.media.id == collection["bttf1"])
        assert [fmt.value for fmt in updated.link.formats] == ["VHS", "DVD"]
        assert [fmt.value for fmt in details.item.format_set] == ["Blu-ray", "DVD", "VHS"]
        _assert_format_invariant(details)

    def test_update_drops_unused_format(self, physical_item_service, collection):
        details = physical_item_service.update_link_formats(
            collection["dvd"], collection["matrix"], ["Blu-ray"]
        )

        assert details.item.format_set == (Format.BLU_RAY,)
        assert physical_item_service.get_item(collection["dvd"]).item.format_set == (Format.BLU_RAY,)

    def test_missing_link(self, physical_item_service, collection):
        with pytest.raises(MediaLinkNotFoundError):
            physical_item_service.update_link_formats(collection["bttf"], collection["matrix"], ["DVD"])

    def test_unknown_item(self, physical_item_service, collection):
        with pytest.raises(PhysicalItemNotFoundError):
            physical_item_service.update_link_formats(999, collection["matrix"], ["DVD"])

    @pytest.mark.parametrize("formats", [[], ["Betamax"]])
    def test_invalid_formats_refused(self, physical_item_service, collection, formats):
        with pytest.raises(MediaLinkError):
            physical_item_service.update_link_formats(collection["bttf"], collection["bttf1"], formats)
        details = physical_item_service.get_item(collection["bttf"])
        assert [fmt.value for fmt in details.item.format_set] == ["Blu-ray"]


class TestRemoveMediaLink:
    """Tests pour remove_media_link."""

    def test_remove_recomputes_formats(self, physical_item_service, collection):
        physical_item_service.add_media_link(
            collection["bttf"], ["DVD"], media_id=collection["alien"], disc_number=3
        )

        details = physical_item_service.remove_media_link(collection["bttf"], collection["alien"])

        assert [fmt.value for fmt in details.item.format_set] == ["Blu-ray"]
        assert len(details.media) == 2
        _assert_format_invariant(details)

    def test_last_link_refused(self, physical_item_service, collection):
        with pytest.raises(MediaLinkError, match="dernier"):
            physical_item_service.remove_media_link(collection["dvd"], collection["matrix"])

    def test_missing_link(self, physical_item_service, collection):
        with pytest.raises(MediaLinkError, match="introuvable"):
            physical_item_service.remove_media_link(collection["bttf"], collection["matrix"])


# ============================================================================
# Suppression
# ============================================================================


class TestDeleteItem:
    """Tests pour delete_item."""

    def test_delete_keeps_media(self, physical_item_service, collection, count_rows):
        physical_item_service.delete_item(collection["bttf"])

        assert count_rows(PhysicalItemModel) == 3
        assert count_rows(MediaModel) == 4
        with pytest.raises(PhysicalItemNotFoundError):
            physical_item_service.get_item(collection["bttf"])

    def test_delete_unknown(self, physical_item_service):
        with pytest.raises(PhysicalItemNotFoundError):
            physical_item_service.delete_item(42)
