from kitchen_sheet.engine.catalog import Catalog
from kitchen_sheet.services.catalog.excel import ExcelCatalogSource
from kitchen_sheet.services.catalog.static import StaticCatalogSource
from kitchen_sheet.services.status import OrderingStatus, StatusStore


class TestCatalogSources:

    def test_menu_workbook_round_trip(self, tmp_path, catalog):
        path = tmp_path / "menu.xlsx"
        ExcelCatalogSource.write(path, catalog)

        loaded = ExcelCatalogSource(path).load()

        assert loaded.names == catalog.names
        assert loaded.find("breakfast sandwich").options_definition == "egg/no egg|croissant/muffin"
        assert loaded.find("fruit cup").option_groups == ()
        assert loaded.find("coffee").price == 2.5

    def test_missing_workbook_gives_empty_catalog(self, tmp_path):
        assert len(ExcelCatalogSource(tmp_path / "missing.xlsx").load()) == 0

    def test_static_default_menu(self):
        catalog = StaticCatalogSource().load()
        assert "breakfast sandwich" in catalog.names

    def test_static_accepts_a_catalog(self, catalog):
        assert StaticCatalogSource(catalog).load() is catalog

    def test_static_accepts_records(self):
        catalog = StaticCatalogSource([{"name": "bagel", "options": "plain/sesame"}]).load()
        assert isinstance(catalog, Catalog)
        assert catalog.names == ["bagel"]


class TestStatusStore:

    def test_defaults_to_published(self, tmp_path):
        assert StatusStore(tmp_path / "status.json").get() == OrderingStatus.PUBLISHED

    def test_pause_persists(self, tmp_path):
        path = tmp_path / "status.json"
        StatusStore(path).set(OrderingStatus.PAUSED)
        assert StatusStore(path).get() == OrderingStatus.PAUSED

    def test_unreadable_file_means_published(self, tmp_path):
        path = tmp_path / "status.json"
        path.write_text("not json", encoding="utf-8")
        assert StatusStore(path).get() == OrderingStatus.PUBLISHED
