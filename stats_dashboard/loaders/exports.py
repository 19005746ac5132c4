"""
CSV export loaders.

Each loader parses one exported stream (glucose, insulin, meals, loop
cycles) into a standardized DataFrame. Column names vary between exporting
tools, so every required column is matched against a list of aliases.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from stats_dashboard.utils.timeseries import normalize_timestamps
from stats_dashboard.utils.units import mmol_to_mg_dl

logger = logging.getLogger(__name__)

FileLike = Union[str, Path, object]


class ExportLoader:
    """Base loader for a CSV export.

    Subclasses declare ``COLUMNS``: standardized name -> accepted aliases,
    and ``REQUIRED``: the standardized names that must be present.
    """

    COLUMNS: Dict[str, List[str]] = {}
    REQUIRED: List[str] = []
    NAME = 'export'

    def __init__(self, source: FileLike, timezone: Optional[str] = None):
        """Initialize loader with a file path or file-like object.

        Args:
            source: Path to the CSV export, or an open file (e.g. an upload).
            timezone: Zone that tz-aware timestamps are converted to.
        """
        self.source = source
        self.timezone = timezone
        self._df: Optional[pd.DataFrame] = None

    def load(self) -> pd.DataFrame:
        """Load and parse the export.

        Raises:
            ValueError: If a required column cannot be found.
        """
        raw = pd.read_csv(self.source, encoding='utf-8-sig')
        raw.columns = raw.columns.str.strip()

        found = {
            name: self._find_column(raw, aliases)
            for name, aliases in self.COLUMNS.items()
        }
        missing = [name for name in self.REQUIRED if found[name] is None]
        if missing:
            raise ValueError(
                f"Could not find required columns {missing} in {self.NAME} file. "
                f"Found columns: {list(raw.columns)}"
            )

        df = pd.DataFrame({name: raw[col] for name, col in found.items() if col is not None})
        df = self.transform(df, found)
        logger.info("Loaded %d %s rows", len(df), self.NAME)
        self._df = df
        return df

    def transform(self, df: pd.DataFrame, found: Dict[str, Optional[str]]) -> pd.DataFrame:
        raise NotImplementedError

    def _find_column(self, df: pd.DataFrame, candidates: List[str]) -> Optional[str]:
        """Find matching column name from candidates (case-insensitive)."""
        lowered = {c.lower(): c for c in df.columns}
        for candidate in candidates:
            if candidate.lower() in lowered:
                return lowered[candidate.lower()]
        return None

    @property
    def df(self) -> pd.DataFrame:
        """Get loaded DataFrame (loads on first access)."""
        if self._df is None:
            self._df = self.load()
        return self._df


class GlucoseLoader(ExportLoader):
    """Glucose readings -> columns: timestamp, glucose_mg_dl.

    Values from a mmol/L column are converted to mg/dL.
    """

    NAME = 'glucose'
    COLUMNS = {
        'timestamp': ['timestamp', 'date', 'datetime', 'Timestamp (YYYY-MM-DDThh:mm:ss)'],
        'mg_dl': ['glucose_mg_dl', 'Glucose Value (mg/dL)', 'glucose', 'sgv', 'value'],
        'mmol_l': ['glucose_mmol_l', 'Glucose Value (mmol/L)', 'mmol'],
    }
    REQUIRED = ['timestamp']

    def transform(self, df, found):
        if found['mg_dl'] is not None:
            values = pd.to_numeric(df['mg_dl'], errors='coerce')
        elif found['mmol_l'] is not None:
            values = mmol_to_mg_dl(pd.to_numeric(df['mmol_l'], errors='coerce'))
        else:
            raise ValueError("Glucose file has neither a mg/dL nor a mmol/L value column")

        out = pd.DataFrame({
            'timestamp': normalize_timestamps(df['timestamp'], self.timezone),
            'glucose_mg_dl': values,
        }).dropna()
        out = out[out['glucose_mg_dl'] > 0]

        # Duplicate timestamps (e.g. overlapping exports) are averaged
        out = out.groupby('timestamp', as_index=False)['glucose_mg_dl'].mean()
        return out.sort_values('timestamp').reset_index(drop=True)


class InsulinLoader(ExportLoader):
    """Insulin deliveries -> columns: timestamp, units, kind.

    ``kind`` is normalized to one of bolus, smb, external, basal.
    """

    NAME = 'insulin'
    COLUMNS = {
        'timestamp': ['timestamp', 'date', 'datetime'],
        'units': ['units', 'amount', 'insulin', 'dose'],
        'kind': ['kind', 'type', 'event_type', 'eventType'],
    }
    REQUIRED = ['timestamp', 'units', 'kind']

    KIND_ALIASES = {
        'bolus': 'bolus',
        'manual': 'bolus',
        'manual bolus': 'bolus',
        'meal bolus': 'bolus',
        'correction bolus': 'bolus',
        'smb': 'smb',
        'super micro bolus': 'smb',
        'external': 'external',
        'external bolus': 'external',
        'external insulin': 'external',
        'basal': 'basal',
        'temp basal': 'basal',
        'tempbasal': 'basal',
    }

    def transform(self, df, found):
        kind = df['kind'].astype(str).str.strip().str.lower().map(self.KIND_ALIASES)
        unknown = int(kind.isna().sum())
        if unknown:
            logger.warning("Skipping %d insulin rows with unknown kind", unknown)

        out = pd.DataFrame({
            'timestamp': normalize_timestamps(df['timestamp'], self.timezone),
            'units': pd.to_numeric(df['units'], errors='coerce'),
            'kind': kind,
        }).dropna()
        out = out[out['units'] >= 0]
        return out.sort_values('timestamp', kind='mergesort').reset_index(drop=True)


class MealLoader(ExportLoader):
    """Meal entries -> columns: timestamp, carbs, fat, protein (grams)."""

    NAME = 'meals'
    COLUMNS = {
        'timestamp': ['timestamp', 'date', 'datetime'],
        'carbs': ['carbs', 'carbs_g', 'carbohydrates'],
        'fat': ['fat', 'fat_g'],
        'protein': ['protein', 'protein_g'],
    }
    REQUIRED = ['timestamp', 'carbs']

    def transform(self, df, found):
        out = pd.DataFrame({'timestamp': normalize_timestamps(df['timestamp'], self.timezone)})
        for macro in ('carbs', 'fat', 'protein'):
            if found[macro] is None:
                out[macro] = 0.0
            else:
                out[macro] = pd.to_numeric(df[macro], errors='coerce').fillna(0.0).clip(lower=0.0)
        out = out.dropna(subset=['timestamp'])
        return out.sort_values('timestamp', kind='mergesort').reset_index(drop=True)


class LoopLoader(ExportLoader):
    """Loop cycles -> columns: start, end, status."""

    NAME = 'loops'
    COLUMNS = {
        'start': ['start', 'started_at', 'loop_start'],
        'end': ['end', 'ended_at', 'loop_end'],
        'status': ['status', 'loop_status', 'result'],
    }
    REQUIRED = ['start', 'status']

    def transform(self, df, found):
        start = normalize_timestamps(df['start'], self.timezone)
        if found['end'] is not None:
            end = normalize_timestamps(df['end'], self.timezone)
        else:
            end = pd.Series(pd.NaT, index=df.index, dtype='datetime64[ns]')
        out = pd.DataFrame({
            'start': start,
            'end': end,
            'status': df['status'].fillna('').astype(str),
        }).dropna(subset=['start'])
        return out.sort_values('start', kind='mergesort').reset_index(drop=True)


# =============================================================================
# DATASET
# =============================================================================

def _empty(columns: Dict[str, str]) -> pd.DataFrame:
    return pd.DataFrame({name: pd.Series(dtype=dtype) for name, dtype in columns.items()})


def empty_glucose() -> pd.DataFrame:
    return _empty({'timestamp': 'datetime64[ns]', 'glucose_mg_dl': 'float64'})


def empty_insulin() -> pd.DataFrame:
    return _empty({'timestamp': 'datetime64[ns]', 'units': 'float64', 'kind': 'object'})


def empty_meals() -> pd.DataFrame:
    return _empty({
        'timestamp': 'datetime64[ns]', 'carbs': 'float64', 'fat': 'float64', 'protein': 'float64',
    })


def empty_loops() -> pd.DataFrame:
    return _empty({'start': 'datetime64[ns]', 'end': 'datetime64[ns]', 'status': 'object'})


@dataclass
class StatsDataset:
    """The four input streams of the statistics screen."""
    glucose: pd.DataFrame = field(default_factory=empty_glucose)
    insulin: pd.DataFrame = field(default_factory=empty_insulin)
    meals: pd.DataFrame = field(default_factory=empty_meals)
    loops: pd.DataFrame = field(default_factory=empty_loops)

    FILE_NAMES = {
        'glucose': ('glucose.csv', GlucoseLoader),
        'insulin': ('insulin.csv', InsulinLoader),
        'meals': ('meals.csv', MealLoader),
        'loops': ('loops.csv', LoopLoader),
    }

    @classmethod
    def from_directory(cls, directory: Union[str, Path], timezone: Optional[str] = None) -> 'StatsDataset':
        """Load every known export found in ``directory``; missing files stay empty."""
        directory = Path(directory)
        dataset = cls()
        for attr, (file_name, loader_cls) in cls.FILE_NAMES.items():
            path = directory / file_name
            if path.exists():
                setattr(dataset, attr, loader_cls(path, timezone).load())
            else:
                logger.info("No %s export at %s", attr, path)
        return dataset
