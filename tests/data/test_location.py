from emlakmetrik.data.location import normalize_location, parse_location_string


class TestNormalizeLocation:
    def test_turkish_characters(self):
        assert normalize_location("Karşıyaka") == "karsiyaka"
        assert normalize_location("ÇANKAYA") == "cankaya"
        assert normalize_location("Göztepe") == "goztepe"

    def test_dotted_capital_i(self):
        assert normalize_location("İSTANBUL") == "istanbul"

    def test_strips_whitespace(self):
        assert normalize_location("  Bursa ") == "bursa"


class TestParseLocationString:
    def test_three_parts_with_aliases(self):
        parsed = parse_location_string("istanbul, kadikoy, Moda")
        assert parsed.city == "İstanbul"
        assert parsed.district == "Kadıköy"
        assert parsed.neighborhood == "Moda"

    def test_city_only(self):
        parsed = parse_location_string("Izmir")
        assert parsed.city == "İzmir"
        assert parsed.district is None
        assert parsed.neighborhood is None

    def test_unknown_name_kept(self):
        assert parse_location_string("Trabzon, Ortahisar").city == "Trabzon"
        assert parse_location_string("Trabzon, Ortahisar").district == "Ortahisar"

    def test_misspelled_alias(self):
        assert parse_location_string("Ornekoy").city == "Örnekköy"

    def test_empty(self):
        parsed = parse_location_string("")
        assert parsed.city == ""
        assert parsed.district is None

    def test_blank_components_dropped(self):
        parsed = parse_location_string("Ankara, , ")
        assert parsed.city == "Ankara"
        assert parsed.district is None
        assert parsed.neighborhood is None
