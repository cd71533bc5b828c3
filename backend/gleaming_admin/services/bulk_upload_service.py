"""
Service for bulk product uploads from spreadsheets.

The first sheet of an .xlsx/.xls workbook (or a .csv file) is read with one
product per row. Column headers are the document field names: name,
description, price, category, imageUrls, availability, stockQuantity,
isBestseller, priceOnRequest, sizes.
"""
import io
import logging
import re
from typing import Dict, List, Optional, Tuple

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from gleaming_admin.core.database import new_document_id
from gleaming_admin.core.exceptions import InvalidUploadError
from gleaming_admin.domain.product import MADE_TO_ORDER, READY_TO_SHIP, material_for
from gleaming_admin.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ('.xlsx', '.xls', '.csv')

TEMPLATE_COLUMNS = [
    "name",
    "description",
    "price",
    "category",
    "imageUrls",
    "availability",
    "stockQuantity",
    "isBestseller",
    "priceOnRequest",
    "sizes",
]

TEMPLATE_EXAMPLE = [
    "Rose Gold Stud Earrings",
    "Hallmarked 18k rose gold studs",
    0,
    "Earrings",
    "https://example.com/studs-1.jpg, https://example.com/studs-2.jpg",
    READY_TO_SHIP,
    4,
    "false",
    "true",
    "",
]


def _cell(row: Dict, column: str):
    """Cell value, with empty cells (NaN) as None"""
    value = row.get(column)
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def _number(value) -> float:
    if value is None or isinstance(value, bool):
        return 0
    number = pd.to_numeric(str(value).strip(), errors='coerce')
    return 0 if pd.isna(number) else float(number)


def _is_true(value) -> bool:
    return value is True or (isinstance(value, str) and value.strip().lower() == 'true')


def _text(value) -> str:
    if value is None:
        return ''
    # Whole numbers come back from Excel as floats
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def slugify(name: str) -> str:
    return re.sub(r'[^a-z0-9]+', '-', name.lower())


def row_to_document(row: Dict, product_id: str, product_type: str, bestseller_only: bool = False) -> Dict:
    """
    Build a product document from one spreadsheet row

    Missing cells fall back to defaults: "Untitled Product", an empty
    description, price and stock 0, "Uncategorized", READY TO SHIP.
    """
    name = _text(_cell(row, 'name')) or 'Untitled Product'
    image_urls = _cell(row, 'imageUrls')
    sizes = _cell(row, 'sizes')

    return {
        "id": product_id,
        "name": name,
        "description": _text(_cell(row, 'description')),
        "price": _number(_cell(row, 'price')),
        "category": _text(_cell(row, 'category')) or 'Uncategorized',
        "imageUrls": [u.strip() for u in re.split(r'[,\n]', _text(image_urls)) if u.strip()],
        "availability": MADE_TO_ORDER if _cell(row, 'availability') == MADE_TO_ORDER else READY_TO_SHIP,
        "type": product_type,
        "material": material_for(product_type),
        "stockQuantity": int(_number(_cell(row, 'stockQuantity'))),
        "isBestseller": bestseller_only or _is_true(_cell(row, 'isBestseller')),
        "priceOnRequest": _is_true(_cell(row, 'priceOnRequest')),
        "sizes": [s.strip() for s in _text(sizes).split(',') if s.strip()],
        "slug": slugify(_text(_cell(row, 'name'))),
    }


class BulkUploadService:
    """Service for spreadsheet imports into the product catalog"""

    def __init__(self, repository: Optional[ProductRepository] = None):
        self.repository = repository or ProductRepository()

    @staticmethod
    def read_rows(file_content: bytes, filename: str) -> List[Dict]:
        """
        Read the first sheet of an upload into row dicts

        Raises:
            InvalidUploadError: unsupported extension or unreadable file
        """
        if not filename or not filename.lower().endswith(SUPPORTED_EXTENSIONS):
            raise InvalidUploadError("The file must be a spreadsheet (.xlsx, .xls or .csv)")

        try:
            if filename.lower().endswith('.csv'):
                df = pd.read_csv(io.BytesIO(file_content), dtype=object)
            else:
                df = pd.read_excel(io.BytesIO(file_content), sheet_name=0, header=0, dtype=object)
        except Exception as e:
            raise InvalidUploadError(f"Could not read {filename}: {str(e)}") from e

        df.columns = [str(col).strip() for col in df.columns]
        return df.to_dict(orient='records')

    def upload(
        self,
        file_content: bytes,
        filename: str,
        product_type: str,
        bestseller_only: bool = False,
    ) -> int:
        """
        Import every row as a new product in a single batch

        Returns:
            Number of products created
        """
        rows = self.read_rows(file_content, filename)

        documents: List[Tuple[str, Dict]] = []
        for row in rows:
            product_id = new_document_id()
            documents.append((product_id, row_to_document(row, product_id, product_type, bestseller_only)))

        count = self.repository.insert_many(documents)
        logger.info(f"Bulk upload of {filename}: {count} {product_type} products created")
        return count

    @staticmethod
    def generate_template() -> io.BytesIO:
        """Excel workbook with the upload columns and one example row"""
        wb = Workbook()
        ws = wb.active
        ws.title = "Products"

        header_fill = PatternFill(start_color="8A6D3B", end_color="8A6D3B", fill_type="solid")
        header_font = Font(color="FFFFFF", bold=True, size=12)
        border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        for col_num, header in enumerate(TEMPLATE_COLUMNS, 1):
            cell = ws.cell(row=1, column=col_num, value=header)
            cell.fill = header_fill
            cell.font = header_font
            cell.alignment = Alignment(horizontal='center', vertical='center')
            cell.border = border

        for col_num, value in enumerate(TEMPLATE_EXAMPLE, 1):
            cell = ws.cell(row=2, column=col_num, value=value)
            cell.border = border
            cell.alignment = Alignment(horizontal='left', vertical='center')

        for letter, width in zip("ABCDEFGHIJ", (30, 40, 12, 16, 60, 18, 15, 14, 16, 16)):
            ws.column_dimensions[letter].width = width

        ws.freeze_panes = 'A2'

        excel_file = io.BytesIO()
        wb.save(excel_file)
        excel_file.seek(0)
        return excel_file
