# app/services/exports.py
import csv
import io
from datetime import date


def rows_to_csv(rows):
    """
    Render uniform dicts as CSV text.

    The header row is the keys of the first row joined by commas; every data
    value is double-quoted with inner quotes doubled. None becomes empty.

    Raises:
        ValueError: If there are no rows
    """
    if not rows:
        raise ValueError("No data to export")

    headers = list(rows[0].keys())
    output = io.StringIO()
    output.write(','.join(headers))
    output.write('\n')

    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator='\n')
    for row in rows:
        writer.writerow(['' if row.get(header) is None else row.get(header) for header in headers])

    return output.getvalue().rstrip('\n')


def export_filename(file_name, today=None):
    today = today or date.today()
    return f"{file_name}_{today.isoformat()}.csv"
