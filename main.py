import argparse
import json
import os

from loguru import logger

from meetzone.config import OUTPUT_DIR, configure_logging
from meetzone.io import (
    candidates_from_records,
    overlap_to_feature_collection,
    read_contours,
    save_overlap,
)
from meetzone.overlap import resolve_contours
from meetzone.ranking import rank_within_region
from meetzone.utils import log_timing


@log_timing
def main():
    parser = argparse.ArgumentParser(description="Meeting area overlap CLI")
    parser.add_argument(
        "contours",
        help="GeoJSON (or any vector file) of contours with contour and group_index properties",
    )
    parser.add_argument(
        "--candidates",
        help="JSON list of candidate places to rank inside the overlap",
    )
    parser.add_argument(
        "--sort-by",
        choices=["distance", "rating", "relevance"],
        default="distance",
        help="Ordering key for candidates",
    )
    parser.add_argument("--out-dir", default=OUTPUT_DIR, help="Output directory")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    args = parser.parse_args()

    if args.log_level:
        configure_logging(args.log_level.upper())
    else:
        configure_logging()

    os.makedirs(args.out_dir, exist_ok=True)

    contours = read_contours(args.contours)
    region = resolve_contours(contours)
    logger.info("Overlap result: {}", region.kind.value)
    if region.message:
        logger.warning("Overlap message: {}", region.message)

    save_overlap(region, os.path.join(args.out_dir, "overlap.geojson"))

    result = {
        "overlap": region.model_dump(mode="json", exclude={"geometry"}),
        "feature_collection": overlap_to_feature_collection(region),
    }

    if args.candidates:
        with open(args.candidates, encoding="utf-8") as f:
            candidates = candidates_from_records(json.load(f))
        ranked = rank_within_region(candidates, region, args.sort_by)
        result["candidates"] = [c.model_dump(mode="json") for c in ranked]
        logger.info(
            "{} of {} candidates kept inside the overlap", len(ranked), len(candidates)
        )

    output_json = json.dumps(result, indent=2, ensure_ascii=False)
    results_path = os.path.join(args.out_dir, "overlap_result.json")
    with open(results_path, "w", encoding="utf-8") as f:
        f.write(output_json)

    logger.success(f"Overlap results saved to {results_path}")


if __name__ == "__main__":
    main()
