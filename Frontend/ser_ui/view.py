import html

import altair as alt
import pandas as pd

from ser_ui.schemas import EmotionResult

POSITIVE_EMOTIONS = frozenset({"Thân Thiện", "Vui Vẻ"})

BAR_COLORS = {True: "#3b82f6", False: "#ef4444"}
BADGE_STYLES = {
    True: ("#dcfce7", "#166534"),
    False: ("#fee2e2", "#991b1b"),
}


def is_positive(emotion: str) -> bool:
    return emotion in POSITIVE_EMOTIONS


def percent(value: float) -> str:
    return f"{value:.1f}%"


def seconds(value: float) -> str:
    return f"{value:.2f}s"


def distribution_frame(result: EmotionResult) -> pd.DataFrame:
    """
    One row per emotion with a percentage strictly above zero, in the order
    the service sent them. `width` is the bar length on a 0-100 scale.
    """
    rows = [
        {
            "emotion": emotion,
            "percentage": percentage,
            "label": percent(percentage),
            "width": percentage,
            "color": BAR_COLORS[is_positive(emotion)],
        }
        for emotion, percentage in result.emotion_percentages.items()
        if percentage > 0
    ]
    return pd.DataFrame(rows, columns=["emotion", "percentage", "label", "width", "color"])


def distribution_chart(frame: pd.DataFrame) -> alt.LayerChart:
    """Bars with the rounded percentage printed at the end of each one."""
    bars = alt.Chart(frame).mark_bar(cornerRadius=4).encode(
        x=alt.X("width:Q", title="%", scale=alt.Scale(domain=[0, 100])),
        y=alt.Y("emotion:N", sort=list(frame["emotion"]), title=None),
        color=alt.Color("color:N", scale=None),
        tooltip=["emotion", "label"],
    )
    labels = bars.mark_text(align="left", baseline="middle", dx=4, fontWeight="bold").encode(
        text="label:N",
        color=alt.value("#374151"),
    )
    return alt.layer(bars, labels)


def emotion_badge(emotion: str) -> str:
    background, foreground = BADGE_STYLES[is_positive(emotion)]
    return (
        f'<span class="emotion-badge" style="background-color:{background};color:{foreground}">'
        f"{html.escape(emotion)}</span>"
    )


def play_label(playing: bool) -> str:
    return "⏸ Pause" if playing else "▶ Play"


def submit_label(loading: bool) -> str:
    return "Analyzing..." if loading else "Analyze Emotion"
