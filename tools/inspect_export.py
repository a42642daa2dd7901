"""
导出PDF检查（页数 + 每页链接目标），用于人工核对月份标签与日历格链接。

用法：
    python tools/inspect_export.py --pdf output/Therapist_Planner_2026.pdf
    python tools/inspect_export.py --pdf out.pdf --page 2
"""

from __future__ import annotations

import argparse
from pathlib import Path

import fitz


def collect_links(path: Path) -> list[list[tuple[tuple[float, float, float, float], int]]]:
    """每页的 (矩形, 1起始目标页) 列表"""
    result = []
    with fitz.open(str(path)) as doc:
        for page in doc:
            links = []
            for link in page.get_links():
                if link.get("kind") != fitz.LINK_GOTO:
                    continue
                r = link["from"]
                links.append(((r.x0, r.y0, r.x1, r.y1), link["page"] + 1))
            result.append(links)
    return result


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--pdf", required=True)
    ap.add_argument("--page", type=int, default=None, help="只显示某页（1起始）")
    args = ap.parse_args()

    pages = collect_links(Path(args.pdf))
    print(f"pages: {len(pages)}")
    for num, links in enumerate(pages, start=1):
        if args.page is not None and num != args.page:
            continue
        targets = ",".join(str(dest) for _, dest in links)
        print(f"[{num}] links={len(links)} -> {targets}")


if __name__ == "__main__":
    main()
