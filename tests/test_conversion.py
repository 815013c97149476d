"""Unit tests for unit conversion and the conversion table."""

from menuplanner.normalize.conversion import ConversionTable, convert_ingredient_units
from menuplanner.schemas import ConversionEntry, MissingConversion


class TestConversionEntry:
    """Tests for ConversionEntry model."""

    def test_numeric_factors_coerced_to_strings(self):
        entry = ConversionEntry(ingredient="Öl", unit="EL", milliliters=15, grams=None)
        assert entry.milliliters == "15"
        assert entry.grams == ""

    def test_target_milliliters(self):
        entry = ConversionEntry(ingredient="Öl", unit="EL", milliliters="15")
        assert entry.target() == ("ml", 15.0)

    def test_grams_take_precedence(self):
        entry = ConversionEntry(ingredient="Honig", unit="EL", grams="20", milliliters="15")
        assert entry.target() == ("g", 20.0)

    def test_decimal_comma_factor(self):
        entry = ConversionEntry(ingredient="Salz", unit="Prise", grams="0,5")
        assert entry.target() == ("g", 0.5)

    def test_empty_or_invalid_factors(self):
        assert ConversionEntry(ingredient="Dill", unit="Bund").target() is None
        assert ConversionEntry(ingredient="Dill", unit="Bund", grams="viel").target() is None
        assert ConversionEntry(ingredient="Dill", unit="Bund", grams="0").target() is None

    def test_generated_id(self):
        first = ConversionEntry(ingredient="Dill", unit="Bund")
        second = ConversionEntry(ingredient="Dill", unit="Bund")
        assert first.id and second.id and first.id != second.id


class TestConversionTable:
    """Tests for ConversionTable lookups."""

    def test_find_case_insensitive(self, conversion_table):
        entry = conversion_table.find("öl", "el")
        assert entry is not None
        assert entry.id == "1"

    def test_first_match_wins(self):
        table = ConversionTable.from_entries(
            [
                {"id": "a", "ingredient": "Reis", "unit": "Tasse", "grams": "180"},
                {"id": "b", "ingredient": "reis", "unit": "tasse", "grams": "200"},
            ]
        )
        assert table.find("Reis", "Tasse").id == "a"

    def test_invalid_rows_skipped(self):
        table = ConversionTable.from_entries([{"ingredient": "Reis"}, {"unit": "g"}])
        assert len(table) == 0

    def test_missing_entries_skips_known_and_duplicates(self, conversion_table):
        new_entries = conversion_table.missing_entries(
            [
                MissingConversion(unit="Tasse", ingredient="Milch"),
                MissingConversion(unit="tasse", ingredient="milch"),
                MissingConversion(unit="EL", ingredient="Öl"),
            ]
        )
        assert [(e.unit, e.ingredient) for e in new_entries] == [("Tasse", "Milch")]
        assert new_entries[0].grams == ""
        assert new_entries[0].milliliters == ""


class TestConvertIngredientUnits:
    """Tests for convert_ingredient_units function."""

    def test_table_conversion_to_milliliters(self):
        table = [ConversionEntry(id="1", ingredient="Öl", unit="EL", milliliters="15")]
        result = convert_ingredient_units(["2 EL Öl"], table)
        assert result.converted == ["30 ml Öl"]
        assert result.missing == []

    def test_table_conversion_to_grams(self, conversion_table):
        result = convert_ingredient_units(["2 Pck Trockenhefe"], conversion_table)
        assert result.converted == ["14 g Trockenhefe"]

    def test_fractional_result_rounded_to_one_decimal(self, conversion_table):
        result = convert_ingredient_units(["3 Prise Salz"], conversion_table)
        assert result.converted == ["1.5 g Salz"]

    def test_synonyms_match_canonical_entries(self, conversion_table):
        result = convert_ingredient_units(
            ["1 Teelöffel Salz", "2 tsp Salz", "1 Esslöffel Öl", "1 tbsp Öl"],
            conversion_table,
        )
        assert result.converted == ["5 g Salz", "10 g Salz", "15 ml Öl", "15 ml Öl"]
        assert result.missing == []

    def test_missing_entry_passes_line_through(self):
        result = convert_ingredient_units(["1 Tasse Milch"], [])
        assert result.converted == ["1 Tasse Milch"]
        assert result.missing == [MissingConversion(unit="Tasse", ingredient="Milch")]

    def test_missing_reported_once(self):
        result = convert_ingredient_units(["1 Tasse Milch", "2 Tasse Milch", "1 tasse milch"], [])
        assert result.converted == ["1 Tasse Milch", "2 Tasse Milch", "1 tasse milch"]
        assert result.missing == [MissingConversion(unit="Tasse", ingredient="Milch")]

    def test_missing_synonym_recorded_canonically(self):
        result = convert_ingredient_units(["1 Teelöffel Zimt"], [])
        assert result.converted == ["1 Teelöffel Zimt"]
        assert result.missing == [MissingConversion(unit="TL", ingredient="Zimt")]

    def test_empty_entry_counts_as_missing(self, conversion_table):
        result = convert_ingredient_units(["1 Bund Dill"], conversion_table)
        assert result.converted == ["1 Bund Dill"]
        assert result.missing == [MissingConversion(unit="Bund", ingredient="Dill")]

    def test_metric_rules_without_table(self):
        result = convert_ingredient_units(["1 kg Kartoffeln", "1,5 l Milch"], [])
        assert result.converted == ["1000 g Kartoffeln", "1500 ml Milch"]
        assert result.missing == []

    def test_other_metric_units_need_table_entries(self):
        """Test that dl, cl and mg are looked up like any other unit."""
        result = convert_ingredient_units(["2 dl Milch", "4 cl Rum", "500 mg Safran"], [])
        assert result.converted == ["2 dl Milch", "4 cl Rum", "500 mg Safran"]
        assert result.missing == [
            MissingConversion(unit="dl", ingredient="Milch"),
            MissingConversion(unit="cl", ingredient="Rum"),
            MissingConversion(unit="mg", ingredient="Safran"),
        ]

    def test_dl_with_table_entry(self):
        table = [ConversionEntry(ingredient="Milch", unit="dl", milliliters="100")]
        result = convert_ingredient_units(["2 dl Milch"], table)
        assert result.converted == ["200 ml Milch"]
        assert result.missing == []

    def test_metric_rule_applied_once(self):
        """Test that a table entry for kg does not convert a second time."""
        table = [ConversionEntry(ingredient="Kartoffeln", unit="kg", grams="1000")]
        result = convert_ingredient_units(["2 kg Kartoffeln"], table)
        assert result.converted == ["2000 g Kartoffeln"]

    def test_target_units_and_unitless_lines_unchanged(self):
        lines = ["200 g Mehl", "100 ml Milch", "3 Eier", "Salz", "200g Butter"]
        result = convert_ingredient_units(lines, [])
        assert result.converted == lines
        assert result.missing == []

    def test_order_preserved(self, conversion_table):
        result = convert_ingredient_units(["Salz", "2 EL Öl", "1 Tasse Reis"], conversion_table)
        assert result.converted == ["Salz", "30 ml Öl", "1 Tasse Reis"]

    def test_non_list_and_invalid_entries(self):
        assert convert_ingredient_units(None, []).converted is None
        result = convert_ingredient_units([None, "", 5], [])
        assert result.converted == [None, "", 5]
        assert result.missing == []
