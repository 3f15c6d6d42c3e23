"""
Export utilities for scrape results.
"""
import json
import os
from dataclasses import asdict
from typing import Dict, List

import pandas as pd

from .models import ContactInfo, Listing, ListingDetails, ScrapeResult
from .utils import now_iso

LISTING_COLUMNS = [
    "id", "region", "title", "price", "address", "subway_info", "layout",
    "tags", "image", "img_urls", "url",
]


def listing_row(x: Listing) -> Dict:
    """Flatten a listing into one export row."""
    return {
        "id": x.id,
        "region": x.region,
        "title": x.title,
        "price": x.price,
        "address": x.address,
        "subway_info": x.subway_info,
        "layout": x.layout,
        "tags": "|".join(x.tags),
        "image": x.image,
        "img_urls": "|".join(x.images),
        "url": x.url,
    }


def listings_frame(listings: List[Listing]) -> pd.DataFrame:
    """Listings as a DataFrame with a stable column order."""
    return pd.DataFrame([listing_row(x) for x in listings], columns=LISTING_COLUMNS)


def save_output_rows(result: ScrapeResult, out_path: str, logger=None):
    """Save scrape results to JSON, CSV or Excel depending on the file extension."""
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    lowered = out_path.lower()
    if lowered.endswith(".json"):
        payload = {
            "generated_at": now_iso(),
            "count": len(result.listings),
            "listings": [asdict(x) for x in result.listings],
            "logs": list(result.logs),
        }
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        rows = len(result.listings)
    else:
        df = listings_frame(result.listings)
        if lowered.endswith(".xlsx"):
            df.to_excel(out_path, index=False)
        else:
            df.to_csv(out_path, index=False, encoding="utf-8-sig")
        rows = len(df)

    if logger:
        logger.info(f">>> Saved {rows} rows to {out_path}")
    else:
        print(f">>> Saved {rows} rows to {out_path}")


def contact_to_json(listing_id: str, contact: ContactInfo) -> str:
    return json.dumps({"id": listing_id, **asdict(contact)}, ensure_ascii=False, indent=2)


def details_to_json(listing_id: str, details: ListingDetails) -> str:
    return json.dumps({"id": listing_id, **asdict(details)}, ensure_ascii=False, indent=2)
