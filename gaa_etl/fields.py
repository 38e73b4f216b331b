"""
Statistics Field Catalogue

Maps the player-stats sheet headers to database column names and value
kinds, and names the team-period statistics read from match sheets.
"""

from collections import namedtuple
from typing import Dict, List

COUNT = "count"
PERCENTAGE = "percentage"
TEXT = "text"

PlayerField = namedtuple("PlayerField", ["header", "name", "kind", "label"])

# Identification columns, validated by their own layer
JERSEY_HEADER = "#"
NAME_HEADER = "Player Name"
MINUTES_HEADER = "Min"
CRITICAL_HEADERS = (JERSEY_HEADER, NAME_HEADER, MINUTES_HEADER)

PLAYER_FIELDS: List[PlayerField] = [
    # Summary
    PlayerField("TE", "total_engagements", COUNT, "Total Engagements"),
    PlayerField("TE/PSR", "te_per_psr", PERCENTAGE, "TE/PSR"),
    PlayerField("Scores", "scores", TEXT, "Scores"),
    PlayerField("PSR", "psr", COUNT, "PSR"),
    PlayerField("PSR/TP", "psr_per_tp", PERCENTAGE, "PSR/TP"),
    # Possession play
    PlayerField("TP", "tp", COUNT, "Total Possessions"),
    PlayerField("ToW", "tow", COUNT, "Turnovers Won"),
    PlayerField("Int", "interceptions", COUNT, "Interceptions"),
    PlayerField("TPL", "tpl", COUNT, "Total Possessions Lost"),
    PlayerField("KP", "kp", COUNT, "Kick Passes"),
    PlayerField("HP", "hp", COUNT, "Hand Passes"),
    PlayerField("Ha", "ha", COUNT, "Hand Pass Attempts"),
    PlayerField("TO", "turnovers", COUNT, "Turnovers"),
    PlayerField("In", "ineffective", COUNT, "Ineffective"),
    PlayerField("SS", "shot_short", COUNT, "Shot Short"),
    PlayerField("S Save", "shot_save", COUNT, "Shot Saved"),
    PlayerField("Fo", "fouled", COUNT, "Fouled"),
    PlayerField("Ww", "woodwork", COUNT, "Woodwork"),
    # Kickouts, home team
    PlayerField("KoW", "ko_drum_kow", COUNT, "Kickouts Won (Home)"),
    PlayerField("WC", "ko_drum_wc", COUNT, "Won Clean (Home)"),
    PlayerField("BW", "ko_drum_bw", COUNT, "Break Won (Home)"),
    PlayerField("SW", "ko_drum_sw", COUNT, "Short Won (Home)"),
    # Kickouts, opposition
    PlayerField("KoW_Opp", "ko_opp_kow", COUNT, "Kickouts Won (Opposition)"),
    PlayerField("WC_Opp", "ko_opp_wc", COUNT, "Won Clean (Opposition)"),
    PlayerField("BW_Opp", "ko_opp_bw", COUNT, "Break Won (Opposition)"),
    PlayerField("SW_Opp", "ko_opp_sw", COUNT, "Short Won (Opposition)"),
    # Attacking play
    PlayerField("TA", "ta", COUNT, "Total Attacks"),
    PlayerField("KR", "kr", COUNT, "Kick Retained"),
    PlayerField("KL", "kl", COUNT, "Kick Lost"),
    PlayerField("CR", "cr", COUNT, "Carry Retained"),
    PlayerField("CL", "cl", COUNT, "Carry Lost"),
    # Shots from play
    PlayerField("Tot", "shots_play_total", COUNT, "Shots From Play"),
    PlayerField("Pts", "shots_play_points", COUNT, "Points From Play"),
    PlayerField("2 Pts", "shots_play_2points", COUNT, "2-Pointers From Play"),
    PlayerField("Gls", "shots_play_goals", COUNT, "Goals From Play"),
    PlayerField("Wid", "shots_play_wide", COUNT, "Wides From Play"),
    PlayerField("Sh", "shots_play_short", COUNT, "Short From Play"),
    PlayerField("Save", "shots_play_save", COUNT, "Saved From Play"),
    PlayerField("Ww_Shots", "shots_play_woodwork", COUNT, "Woodwork From Play"),
    PlayerField("Bd", "shots_play_blocked", COUNT, "Blocked From Play"),
    PlayerField("45", "shots_play_45", COUNT, "45s From Play"),
    PlayerField("%", "shots_play_percentage", PERCENTAGE, "Shots From Play %"),
    # Frees
    PlayerField("Tot_Frees", "frees_total", COUNT, "Frees Taken"),
    PlayerField("Pts_Frees", "frees_points", COUNT, "Points From Frees"),
    PlayerField("2 Pts_Frees", "frees_2points", COUNT, "2-Pointers From Frees"),
    PlayerField("Gls_Frees", "frees_goals", COUNT, "Goals From Frees"),
    PlayerField("Wid_Frees", "frees_wide", COUNT, "Wides From Frees"),
    PlayerField("Sh_Frees", "frees_short", COUNT, "Short From Frees"),
    PlayerField("Save_Frees", "frees_save", COUNT, "Saved From Frees"),
    PlayerField("Ww_Frees", "frees_woodwork", COUNT, "Woodwork From Frees"),
    PlayerField("45_Frees", "frees_45", COUNT, "45s From Frees"),
    PlayerField("QF", "frees_qf", COUNT, "Quick Frees"),
    PlayerField("%_Frees", "frees_percentage", PERCENTAGE, "Frees %"),
    # Total shots
    PlayerField("TS", "total_shots", COUNT, "Total Shots"),
    PlayerField("%_Total", "total_shots_percentage", PERCENTAGE, "Total Shots %"),
    # Assists
    PlayerField("TA_Assists", "assists_total", COUNT, "Assists"),
    PlayerField("Point", "assists_point", COUNT, "Point Assists"),
    PlayerField("Goal", "assists_goal", COUNT, "Goal Assists"),
    # Tackles
    PlayerField("Tot_Tackles", "tackles_total", COUNT, "Tackles"),
    PlayerField("Con", "tackles_contested", COUNT, "Tackles Contested"),
    PlayerField("Mis", "tackles_missed", COUNT, "Tackles Missed"),
    PlayerField("%_Tackles", "tackles_percentage", PERCENTAGE, "Tackles %"),
    # Frees conceded
    PlayerField("Tot_FC", "frees_conceded_total", COUNT, "Frees Conceded"),
    PlayerField("Att", "frees_conceded_attack", COUNT, "Frees Conceded (Attack)"),
    PlayerField("Mid", "frees_conceded_midfield", COUNT, "Frees Conceded (Midfield)"),
    PlayerField("Def", "frees_conceded_defense", COUNT, "Frees Conceded (Defence)"),
    PlayerField("Pen", "frees_conceded_penalty", COUNT, "Penalties Conceded"),
    # 50m frees conceded
    PlayerField("Tot_50m", "frees_50m_total", COUNT, "50m Frees"),
    PlayerField("Delay", "frees_50m_delay", COUNT, "50m Frees (Delay)"),
    PlayerField("Diss", "frees_50m_dissent", COUNT, "50m Frees (Dissent)"),
    PlayerField("3v3", "frees_50m_3v3", COUNT, "50m Frees (3v3)"),
    # Bookings
    PlayerField("Yel", "yellow_cards", COUNT, "Yellow Cards"),
    PlayerField("Bla", "black_cards", COUNT, "Black Cards"),
    PlayerField("Red", "red_cards", COUNT, "Red Cards"),
    # Throw-ups
    PlayerField("Won", "throw_up_won", COUNT, "Throw-ups Won"),
    PlayerField("Los", "throw_up_lost", COUNT, "Throw-ups Lost"),
    # Goalkeeping
    PlayerField("TKo", "gk_total_kickouts", COUNT, "GK Kickouts"),
    PlayerField("KoR", "gk_kickout_retained", COUNT, "GK Kickouts Retained"),
    PlayerField("KoL", "gk_kickout_lost", COUNT, "GK Kickouts Lost"),
    PlayerField("%_GK", "gk_kickout_percentage", PERCENTAGE, "GK Kickout %"),
    PlayerField("Saves", "gk_saves", COUNT, "GK Saves"),
]

FIELDS_BY_NAME: Dict[str, PlayerField] = {f.name: f for f in PLAYER_FIELDS}

COUNT_FIELDS = [f for f in PLAYER_FIELDS if f.kind == COUNT]
PERCENTAGE_FIELDS = [f for f in PLAYER_FIELDS if f.kind == PERCENTAGE]

# Successive occurrences of a repeated header in the player-stats sheet
DUPLICATE_HEADER_NAMES: Dict[str, List[str]] = {
    "Tot": ["Tot", "Tot_Frees", "Tot_Tackles", "Tot_FC", "Tot_50m"],
    "%": ["%", "%_Frees", "%_Total", "%_Tackles", "%_GK"],
    "Ww": ["Ww", "Ww_Shots", "Ww_Frees"],
    "KoW": ["KoW", "KoW_Opp"],
    "WC": ["WC", "WC_Opp"],
    "BW": ["BW", "BW_Opp"],
    "SW": ["SW", "SW_Opp"],
    "Pts": ["Pts", "Pts_Frees"],
    "2 Pts": ["2 Pts", "2 Pts_Frees"],
    "Gls": ["Gls", "Gls_Frees"],
    "Wid": ["Wid", "Wid_Frees"],
    "Sh": ["Sh", "Sh_Frees"],
    "Save": ["Save", "Save_Frees"],
    "45": ["45", "45_Frees"],
    "TA": ["TA", "TA_Assists"],
}


def disambiguate_header(header: str, occurrence: int) -> str:
    """
    Name the nth occurrence (0-based) of a header.

    Args:
        header: Header text as it appears in the sheet
        occurrence: How many times the header has been seen before

    Returns:
        Unique header name used as the field map key
    """
    if occurrence == 0:
        return header

    names = DUPLICATE_HEADER_NAMES.get(header)
    if names and occurrence < len(names):
        return names[occurrence]

    return f"{header}_{occurrence + 1}"


# Team-period statistics, in match-sheet row order
PERIODS = ("1st", "2nd", "Full")
SIDES = ("home", "away")

SOURCE_NAMES = (
    "kickout_long",
    "kickout_short",
    "opp_kickout_long",
    "opp_kickout_short",
    "turnover",
    "possession_lost",
    "shot_short",
    "throw_up_in",
)

SCORE_SOURCE_FIELDS = [f"score_source_{name}" for name in SOURCE_NAMES]
SHOT_SOURCE_FIELDS = [f"shot_source_{name}" for name in SOURCE_NAMES]
TEAM_COUNT_FIELDS = SCORE_SOURCE_FIELDS + SHOT_SOURCE_FIELDS
