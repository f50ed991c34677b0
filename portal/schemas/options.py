"""
Select vocabularies offered by the application form.
"""
from typing import List
from pydantic import BaseModel, Field


class SelectOption(BaseModel):
    value: str
    label: str


def _options(*pairs) -> List[SelectOption]:
    return [SelectOption(value=value, label=label) for value, label in pairs]


GENDER_OPTIONS = _options(
    ("male", "Male"),
    ("female", "Female"),
    ("non_binary", "Non-binary"),
    ("prefer_not_to_say", "Prefer not to say"),
    ("other", "Other"),
)

RACE_OPTIONS = _options(
    ("american_indian", "American Indian or Alaska Native"),
    ("asian", "Asian"),
    ("black", "Black or African American"),
    ("pacific_islander", "Native Hawaiian or Pacific Islander"),
    ("white", "White"),
    ("two_or_more", "Two or more races"),
    ("prefer_not_to_say", "Prefer not to say"),
)

ETHNICITY_OPTIONS = _options(
    ("hispanic_latino", "Hispanic or Latino"),
    ("not_hispanic_latino", "Not Hispanic or Latino"),
    ("prefer_not_to_say", "Prefer not to say"),
)

LEVEL_OF_STUDY_OPTIONS = _options(
    ("high_school", "High School"),
    ("freshman", "Freshman (1st year)"),
    ("sophomore", "Sophomore (2nd year)"),
    ("junior", "Junior (3rd year)"),
    ("senior", "Senior (4th+ year)"),
    ("graduate", "Graduate Student (Masters)"),
    ("phd", "PhD Student"),
    ("bootcamp", "Bootcamp"),
    ("other", "Other"),
)

EXPERIENCE_LEVEL_OPTIONS = _options(
    ("beginner", "Beginner (< 1 year)"),
    ("intermediate", "Intermediate (1-3 years)"),
    ("advanced", "Advanced (3-5 years)"),
    ("expert", "Expert (5+ years)"),
)

SHIRT_SIZE_OPTIONS = _options(
    ("xs", "XS"),
    ("s", "S"),
    ("m", "M"),
    ("l", "L"),
    ("xl", "XL"),
    ("xxl", "2XL"),
    ("xxxl", "3XL"),
)

DIETARY_RESTRICTION_OPTIONS = _options(
    ("vegan", "Vegan"),
    ("vegetarian", "Vegetarian"),
    ("halal", "Halal"),
    ("nuts", "Nut Allergy"),
    ("fish", "Fish/Shellfish Allergy"),
    ("wheat", "Wheat/Gluten Free"),
    ("dairy", "Dairy Free"),
    ("eggs", "Egg Allergy"),
    ("no_beef", "No Beef"),
    ("no_pork", "No Pork"),
)

HEARD_ABOUT_OPTIONS = _options(
    ("friend", "Friend/Word of mouth"),
    ("social_media", "Social Media"),
    ("university", "University/Professor"),
    ("mlh", "MLH"),
    ("search", "Google/Search Engine"),
    ("previous_event", "Previous Event"),
    ("other", "Other"),
)

COUNTRY_OPTIONS = _options(
    ("US", "United States"),
    ("CA", "Canada"),
    ("MX", "Mexico"),
    ("IN", "India"),
    ("CN", "China"),
    ("GB", "United Kingdom"),
    ("DE", "Germany"),
    ("FR", "France"),
    ("JP", "Japan"),
    ("KR", "South Korea"),
    ("BR", "Brazil"),
    ("AU", "Australia"),
    ("other", "Other"),
)


class FormOptionsResponse(BaseModel):
    """All select vocabularies used by the application wizard."""
    gender: List[SelectOption] = Field(default_factory=lambda: GENDER_OPTIONS)
    race: List[SelectOption] = Field(default_factory=lambda: RACE_OPTIONS)
    ethnicity: List[SelectOption] = Field(default_factory=lambda: ETHNICITY_OPTIONS)
    level_of_study: List[SelectOption] = Field(default_factory=lambda: LEVEL_OF_STUDY_OPTIONS)
    software_experience_level: List[SelectOption] = Field(default_factory=lambda: EXPERIENCE_LEVEL_OPTIONS)
    shirt_size: List[SelectOption] = Field(default_factory=lambda: SHIRT_SIZE_OPTIONS)
    dietary_restrictions: List[SelectOption] = Field(default_factory=lambda: DIETARY_RESTRICTION_OPTIONS)
    heard_about: List[SelectOption] = Field(default_factory=lambda: HEARD_ABOUT_OPTIONS)
    country_of_residence: List[SelectOption] = Field(default_factory=lambda: COUNTRY_OPTIONS)
