FONT_SIZES = (8, 10, 12, 14, 16, 18, 20, 22, 24, 28, 32, 36, 48)
FORMATS = ("size", "bold", "italic", "underline", "strike", "list", "bullet")


def font_size_whitelist() -> list[str]:
    return [f"{size}px" for size in FONT_SIZES]


def editor_config() -> dict:
    """Options handed to the Quill editor on the rules section."""
    sizes = font_size_whitelist()
    return {
        "theme": "snow",
        "sizes": sizes,
        "modules": {
            "toolbar": [
                [{"size": sizes}],
                ["bold", "italic", "underline", "strike"],
                [{"list": "ordered"}, {"list": "bullet"}],
            ]
        },
        "formats": list(FORMATS),
    }
