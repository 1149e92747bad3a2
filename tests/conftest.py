from __future__ import annotations

import pytest

from brandkit.director import DesignSystemOutput


def _swatch(name, hex_, usage="General use"):
    return {"name": name, "hex": hex_, "usage": usage}


@pytest.fixture
def design_system_data():
    return {
        "brand_name": "Harbor Health",
        "tagline": "Care that comes to you",
        "brand_overview": "Harbor Health brings calm, reliable telemedicine to busy families.",
        "colors": {
            "primary": _swatch("Harbor Navy", "#1F4E79", "Headers, primary buttons"),
            "secondary": _swatch("Tide Teal", "#4A90A4", "Secondary actions"),
            "accent": _swatch("Beacon Amber", "#F2A65A", "Highlights"),
            "neutrals": [
                _swatch("Foam", "#F7F9FA"),
                _swatch("Mist", "#E3E8EB"),
                _swatch("Pebble", "#A7B1B7"),
                _swatch("Slate", "#5B666D"),
                _swatch("Deep Water", "#1E2427"),
            ],
            "semantic": {
                "success": _swatch("Kelp", "#2E9E5B"),
                "warning": _swatch("Sand", "#E0A030"),
                "error": _swatch("Coral", "#D64545"),
                "info": _swatch("Sky", "#3A7BD5"),
            },
        },
        "typography": {
            "heading_font": "Inter",
            "body_font": "Inter",
            "scale": [
                {"name": "Display", "size": "48px", "line_height": "1.1", "weight": "700", "usage": "Hero"},
                {"name": "Body", "size": "16px", "line_height": "1.5", "weight": "400", "usage": "Paragraphs"},
            ],
        },
        "spacing": {
            "base_unit": 8,
            "scale": [{"name": "sm", "value": "8px"}, {"name": "md", "value": "16px"}],
            "border_radius": [{"name": "md", "value": "8px"}],
            "shadows": [{"name": "sm", "value": "0 1px 2px rgba(0,0,0,0.1)", "usage": "Cards"}],
        },
        "logo_guidelines": {
            "description": "A lighthouse beam folded into an H.",
            "clear_space_rule": "Height of the H on every side",
            "minimum_size": "24px",
            "donts": ["Don't stretch", "Don't recolor"],
        },
        "brand_voice": {
            "personality": "Calm, warm and direct.",
            "tone_attributes": ["Reassuring", "Clear"],
            "dos": ["Use plain language"],
            "donts": ["Use medical jargon"],
            "sample_headline": "A doctor, right when you need one",
            "sample_body_copy": "Book a visit in minutes, from anywhere.",
        },
    }


@pytest.fixture
def design_system(design_system_data):
    return DesignSystemOutput.model_validate(design_system_data)
