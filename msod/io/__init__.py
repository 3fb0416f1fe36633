from ._read import read_csv
from ._write import write_csv, write_table
