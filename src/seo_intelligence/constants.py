"""Markets offered for keyword research."""

DEFAULT_COUNTRY = "United States of America"

COUNTRIES: tuple[str, ...] = (
    "United States of America",
    "United Kingdom",
    "Canada",
    "Australia",
    "New Zealand",
    "Ireland",
    "Germany",
    "France",
    "Spain",
    "Italy",
    "Netherlands",
    "Belgium",
    "Switzerland",
    "Austria",
    "Sweden",
    "Norway",
    "Denmark",
    "Finland",
    "Poland",
    "Portugal",
    "India",
    "Singapore",
    "Japan",
    "South Korea",
    "China",
    "Brazil",
    "Mexico",
    "Argentina",
    "South Africa",
    "United Arab Emirates",
)
