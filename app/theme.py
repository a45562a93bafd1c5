from pydantic import BaseModel, ConfigDict


class Theme(BaseModel):
    model_config = ConfigDict(frozen=True)

    background: str
    card_background: str
    text: str
    secondary_text: str
    accent: str
    positive: str
    negative: str
    border: str


LIGHT = Theme(
    background="#FFFFFF",
    card_background="#F6F8FA",
    text="#0D1117",
    secondary_text="#57606A",
    accent="#2E77D0",
    positive="#4CAF50",
    negative="#FF5252",
    border="#D0D7DE",
)

DARK = Theme(
    background="#0D1117",
    card_background="#161B22",
    text="#FFFFFF",
    secondary_text="#8B949E",
    accent="#2E77D0",
    positive="#4CAF50",
    negative="#FF5252",
    border="#30363D",
)


def get_theme(dark_mode: bool) -> Theme:
    return DARK if dark_mode else LIGHT


def percentage_color(percentage: float, theme: Theme) -> str:
    return theme.positive if percentage >= 0 else theme.negative
