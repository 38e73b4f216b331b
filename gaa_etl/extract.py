"""
Excel Workbook Extraction

Reads a match statistics workbook with pandas and produces one
RawSheetRecord per match. A match is described by two sheets: the match
sheet (team statistics per period) and its "Player stats" sheet, paired
by the leading match number. Optional position sheets assign players
to GK/DEF/MID/FWD.
"""

import logging
import os
from collections import Counter
from typing import Any, Dict, List, Optional

import pandas as pd

from gaa_etl.fields import (
    JERSEY_HEADER,
    NAME_HEADER,
    PERIODS,
    SCORE_SOURCE_FIELDS,
    SHOT_SOURCE_FIELDS,
    disambiguate_header,
)
from gaa_etl.models import RawPlayerRow, RawSheetRecord, RawTeamRow
from gaa_etl.parsing import (
    is_blank,
    is_player_sheet,
    normalize_player_name,
    parse_match_sheet_name,
    parse_title_cell,
    sheet_match_number,
    text_value,
)
from gaa_etl.positions import POSITION_SHEETS

logger = logging.getLogger(__name__)

# Match sheet layout (1-based rows and columns)
TITLE_ROW, TITLE_COLUMN = 1, 2
SCORE_ROW = 4
POSSESSION_ROW = 5
SCORE_SOURCE_FIRST_ROW = 7
SHOT_SOURCE_FIRST_ROW = 16
TEAM_COLUMNS = {"home": 2, "away": 5}
PERIOD_OFFSETS = {"1st": 0, "2nd": 1, "Full": 2}

# Player stats sheet layout
PLAYER_HEADER_ROW = 3
PLAYER_FIRST_DATA_ROW = 4

# Position sheet layout
POSITION_NAME_COLUMN = 2
POSITION_FIRST_ROW = 4
POSITION_ROW_STEP = 28


def _cell(frame: pd.DataFrame, row: int, column: int) -> Any:
    """Value at a 1-based (row, column), or None outside the used range."""
    if row < 1 or column < 1 or row > frame.shape[0] or column > frame.shape[1]:
        return None
    value = frame.iat[row - 1, column - 1]
    return None if is_blank(value) else value


class ExcelWorkbookReader:
    """
    Reads match and player statistics sheets from an Excel workbook.
    """

    def __init__(self, home_team_name: str = "Drum"):
        """
        Initialize the reader.

        Args:
            home_team_name: Name of the tracked team as written in title cells
        """
        self.home_team_name = home_team_name

    def read(self, file_path: str) -> List[RawSheetRecord]:
        """
        Read a workbook from disk.

        Args:
            file_path: Path to an .xlsx workbook

        Returns:
            One RawSheetRecord per match sheet, ordered by match number

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file cannot be read as a workbook
        """
        if not os.path.isfile(file_path):
            logger.error(f"Workbook not found: {file_path}")
            raise FileNotFoundError(f"Workbook not found: {file_path}")

        logger.info(f"Reading workbook: {file_path}")
        try:
            sheets = pd.read_excel(file_path, sheet_name=None, header=None, engine="openpyxl")
        except Exception as e:
            logger.error(f"Failed to read workbook {file_path}: {e}")
            raise ValueError(f"Could not read workbook '{os.path.basename(file_path)}': {e}") from e

        return self.parse_workbook(sheets)

    def parse_workbook(self, sheets: Dict[str, pd.DataFrame]) -> List[RawSheetRecord]:
        """
        Build records from already-loaded sheets.

        Args:
            sheets: Sheet name -> DataFrame read with header=None

        Returns:
            One RawSheetRecord per match sheet, ordered by match number
        """
        positions = self.read_position_sheets(sheets)

        player_sheets: Dict[int, pd.DataFrame] = {}
        match_sheets = []
        for name, frame in sheets.items():
            number = sheet_match_number(name)
            if number is None:
                continue
            if is_player_sheet(name):
                player_sheets[number] = frame
            elif " vs " in name:
                match_sheets.append((number, name, frame))

        records = []
        for number, name, frame in sorted(match_sheets, key=lambda item: item[0]):
            player_frame = player_sheets.get(number)
            if player_frame is None:
                logger.warning(f"No player stats sheet found for match sheet '{name}'")
            records.append(self.parse_match(name, frame, player_frame, positions))

        logger.info(f"Found {len(records)} match sheets ({len(player_sheets)} player stats sheets)")
        return records

    def parse_match(
        self,
        sheet_name: str,
        match_frame: pd.DataFrame,
        player_frame: Optional[pd.DataFrame] = None,
        positions: Optional[Dict[str, str]] = None,
    ) -> RawSheetRecord:
        """
        Build the record for one match.

        Args:
            sheet_name: Match sheet name
            match_frame: Match sheet contents
            player_frame: Paired player stats sheet, if any
            positions: Lower-cased player name -> position code

        Returns:
            RawSheetRecord (metadata is None when neither the title cell
            nor the sheet name can be parsed)
        """
        metadata = parse_title_cell(_cell(match_frame, TITLE_ROW, TITLE_COLUMN), self.home_team_name)
        if metadata is None:
            metadata = parse_match_sheet_name(sheet_name)

        field_map: Dict[str, int] = {}
        player_rows: List[RawPlayerRow] = []
        if player_frame is not None:
            field_map = self.read_field_map(player_frame)
            player_rows = self.read_player_rows(player_frame, field_map, positions or {})

        return RawSheetRecord(
            sheet_name=sheet_name,
            metadata=metadata,
            field_map=field_map,
            player_rows=player_rows,
            team_rows=self.read_team_rows(match_frame),
        )

    def read_team_rows(self, frame: pd.DataFrame) -> List[RawTeamRow]:
        """
        Read team statistics for both teams and all three periods.

        A team/period block with no values at all yields no row.
        """
        rows = []
        for side, base_column in TEAM_COLUMNS.items():
            for period in PERIODS:
                column = base_column + PERIOD_OFFSETS[period]
                values: Dict[str, Any] = {
                    "scoreline": _cell(frame, SCORE_ROW, column),
                    "total_possession": _cell(frame, POSSESSION_ROW, column),
                }
                for offset, name in enumerate(SCORE_SOURCE_FIELDS):
                    values[name] = _cell(frame, SCORE_SOURCE_FIRST_ROW + offset, column)
                for offset, name in enumerate(SHOT_SOURCE_FIELDS):
                    values[name] = _cell(frame, SHOT_SOURCE_FIRST_ROW + offset, column)

                if all(value is None for value in values.values()):
                    continue
                rows.append(RawTeamRow(side=side, period=period, values=values))
        return rows

    def read_field_map(self, frame: pd.DataFrame) -> Dict[str, int]:
        """
        Map header names to 1-based columns, naming repeated headers by occurrence.
        """
        field_map: Dict[str, int] = {}
        seen: Counter = Counter()
        for column in range(1, frame.shape[1] + 1):
            header = text_value(_cell(frame, PLAYER_HEADER_ROW, column))
            if header is None:
                continue
            field_map[disambiguate_header(header, seen[header])] = column
            seen[header] += 1
        return field_map

    def read_player_rows(
        self,
        frame: pd.DataFrame,
        field_map: Dict[str, int],
        positions: Dict[str, str],
    ) -> List[RawPlayerRow]:
        """
        Read player rows until the first row without a jersey or name.
        """
        jersey_column = field_map.get(JERSEY_HEADER)
        name_column = field_map.get(NAME_HEADER)
        if jersey_column is None or name_column is None:
            return []

        rows = []
        for row in range(PLAYER_FIRST_DATA_ROW, frame.shape[0] + 1):
            if _cell(frame, row, jersey_column) is None or _cell(frame, row, name_column) is None:
                break
            values = {header: _cell(frame, row, column) for header, column in field_map.items()}
            name = normalize_player_name(values[NAME_HEADER]).lower()
            rows.append(RawPlayerRow(row_number=row, values=values, position_code=positions.get(name)))
        return rows

    def read_position_sheets(self, sheets: Dict[str, pd.DataFrame]) -> Dict[str, str]:
        """
        Collect explicit positions from the Goalkeepers/Defenders/Midfielders/Forwards sheets.

        Returns:
            Lower-cased player name -> position code
        """
        positions: Dict[str, str] = {}
        for sheet_name, code in POSITION_SHEETS.items():
            frame = sheets.get(sheet_name)
            if frame is None:
                continue
            row = POSITION_FIRST_ROW
            while True:
                name = normalize_player_name(_cell(frame, row, POSITION_NAME_COLUMN))
                if not name:
                    break
                key = name.lower()
                if key in positions and positions[key] != code:
                    logger.warning(
                        f"Player '{name}' is listed as {positions[key]} and {code}; using {code}"
                    )
                positions[key] = code
                row += POSITION_ROW_STEP
        if positions:
            logger.info(f"Read explicit positions for {len(positions)} players")
        return positions
