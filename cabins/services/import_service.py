"""
Booking import service: loads bookings from CSV/Excel exports.
"""

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from django.db import IntegrityError, transaction

from cabins.exceptions import InvalidSlotKey
from cabins.services.calendar_window import parse_date_key
from cabins.services.snapshots import BookingStatus, parse_shift


class BookingImportService:
    """
    Service for importing booking rows into a location's cabins.

    Column Mapping handles English and Portuguese header variants.
    Row errors are collected and never abort the import.
    """

    DEFAULT_COLUMN_MAPPING = {
        'cabin': ['Cabin', 'Cabin Name', 'Cabine', 'cabin_id'],
        'date': ['Date', 'Data', 'Booking Date', 'booking_date'],
        'shift': ['Shift', 'Turn', 'Turno', 'Period'],
        'status': ['Status', 'Situação', 'Situacao'],
        'price': ['Price', 'Preço', 'Preco', 'Amount', 'Valor'],
        'professional': ['Professional', 'Profissional', 'Provider', 'professional_name'],
    }

    SHIFT_ALIASES = {
        'manhã': 'morning',
        'manha': 'morning',
        'tarde': 'afternoon',
        'noite': 'evening',
    }

    REQUIRED_COLUMNS = {'cabin', 'date', 'shift'}

    def __init__(self, location, column_mapping=None):
        self.location = location
        self.column_mapping = column_mapping or self.DEFAULT_COLUMN_MAPPING
        self.errors: List[Dict] = []
        self.stats = {'rows_total': 0, 'rows_created': 0, 'rows_skipped': 0}

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def validate_file(self, file_path):
        """Read and map a file without writing anything."""
        df = self._read_file(Path(file_path))
        if df is None:
            return {'valid': False, 'issues': self.errors, 'stats': {}}
        df = self._map_columns(df)
        missing = self.REQUIRED_COLUMNS - set(df.columns)
        return {
            'valid': not missing,
            'issues': self.errors,
            'stats': {
                'total_rows': len(df),
                'columns_found': [c for c in df.columns if c in self.column_mapping],
            },
        }

    def import_file(self, file_path):
        """
        Import every row of a CSV/Excel file.

        Returns:
            dict with success flag, row counters and per-row errors
        """
        df = self._read_file(Path(file_path))
        if df is None:
            return self._build_result(success=False)

        df = self._map_columns(df)
        if self.REQUIRED_COLUMNS - set(df.columns):
            return self._build_result(success=False)

        self._process_dataframe(df)
        return self._build_result(success=True)

    # =========================================================================
    # READING & MAPPING
    # =========================================================================

    SUPPORTED_SUFFIXES = ('.xlsx', '.csv')

    def _read_file(self, file_path: Path) -> Optional[pd.DataFrame]:
        suffix = file_path.suffix.lower()
        try:
            if suffix == '.xlsx':
                return pd.read_excel(file_path, dtype=str, engine='openpyxl')
            if suffix == '.csv':
                for encoding in ['utf-8', 'latin1']:
                    try:
                        return pd.read_csv(file_path, encoding=encoding, dtype=str, index_col=False)
                    except UnicodeDecodeError:
                        continue
            self.errors.append({'row': 0, 'message': f'Unsupported file format: {suffix}'})
            return None
        except (OSError, ValueError) as e:
            self.errors.append({'row': 0, 'message': f'Error reading file: {e}'})
            return None

    def _map_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        column_map = {}
        df.columns = [str(col).strip() for col in df.columns]

        for standard_name, possible_names in self.column_mapping.items():
            lowered = [name.lower() for name in possible_names]
            for col in df.columns:
                if col.lower() in lowered or col.lower() == standard_name:
                    column_map[col] = standard_name
                    break

        df = df.rename(columns=column_map)

        missing = self.REQUIRED_COLUMNS - set(column_map.values())
        if missing:
            self.errors.append({
                'row': 0,
                'message': 'Missing required columns: ' + ', '.join(sorted(missing)),
            })
        return df

    # =========================================================================
    # ROW PROCESSING
    # =========================================================================

    def _process_dataframe(self, df: pd.DataFrame) -> None:
        from cabins.models import Cabin

        cabins_by_name = {c.name.lower(): c for c in Cabin.objects.filter(location=self.location)}
        cabins_by_id = {str(c.pk): c for c in cabins_by_name.values()}

        for i, (_, row) in enumerate(df.iterrows()):
            row_num = i + 2  # header is row 1
            self.stats['rows_total'] += 1
            try:
                self._process_row(row, cabins_by_name, cabins_by_id)
                self.stats['rows_created'] += 1
            except (InvalidSlotKey, ValueError, IntegrityError) as e:
                self.errors.append({'row': row_num, 'message': str(e)})
                self.stats['rows_skipped'] += 1

    def _cell(self, row, name):
        value = row.get(name)
        if value is None or pd.isna(value):
            return ''
        return str(value).strip()

    def _process_row(self, row, cabins_by_name, cabins_by_id):
        from cabins.models import Booking

        cabin_ref = self._cell(row, 'cabin')
        cabin = cabins_by_id.get(cabin_ref) or cabins_by_name.get(cabin_ref.lower())
        if cabin is None:
            raise ValueError(f'Unknown cabin: {cabin_ref!r}')

        day = parse_date_key(self._cell(row, 'date')[:10])
        raw_shift = self._cell(row, 'shift').lower()
        shift = parse_shift(self.SHIFT_ALIASES.get(raw_shift, raw_shift))

        status = self._cell(row, 'status').lower() or BookingStatus.CONFIRMED.value
        if status not in {s.value for s in BookingStatus}:
            raise ValueError(f'Unknown status: {status!r}')

        price = self._parse_price(self._cell(row, 'price'))

        with transaction.atomic():
            Booking.objects.create(
                cabin=cabin,
                date=day,
                shift=shift.value,
                status=status,
                price=price,
                professional_name=self._cell(row, 'professional'),
            )

    def _parse_price(self, value):
        if not value:
            return Decimal('0.00')
        try:
            return Decimal(value.replace(',', '.'))
        except InvalidOperation:
            raise ValueError(f'Invalid price: {value!r}') from None

    def _build_result(self, success):
        total = self.stats['rows_total']
        return {
            'success': success,
            'rows_total': total,
            'rows_created': self.stats['rows_created'],
            'rows_skipped': self.stats['rows_skipped'],
            'success_rate': (self.stats['rows_created'] / total * 100) if total else 0.0,
            'errors': self.errors,
        }
