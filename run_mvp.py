from rollcsv.logging.setup import setup_logging
from rollcsv.pipeline.runner import run_split

setup_logging()

summary = run_split(
    input_csv="examples/sample_input.csv",
    output_csv="examples/out/rows.csv",
    config_yaml="configs/split.yaml",
    log_txt="examples/out/split_log.txt",
    chunksize=100000,
)
print(f"DONE: {summary['rows_total']} rows -> {len(summary['files'])} file(s)")
