from __future__ import annotations

import json
import math
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ezdxf.math import Vec2

from dxf_cad_editor.geometry.spatial import entity_bounds
from dxf_cad_editor.model.drawing import Drawing
from dxf_cad_editor.model.entities import Entity, Hatch, Insert, Polyline, Text


# Helper functions

def safe_float(x: Any) -> Optional[float]:
    if x is None:
        return None
    v = float(x)
    return v if math.isfinite(v) else None


def clean_text(s: str) -> str:
    # normalize whitespace, keep it human + search friendly
    s = s.replace("\x00", "")
    s = re.sub(r"\s+", " ", s).strip()
    return s


def point_to_list(p: Vec2) -> List[float]:
    return [float(p.x), float(p.y)]


def bbox_for_entities(entities: Sequence[Entity]) -> Optional[List[float]]:
    """[xmin, ymin, xmax, ymax] over every entity with a known extent."""
    boxes = [b for b in (entity_bounds(e) for e in entities) if b is not None]
    if not boxes:
        return None
    return [
        float(min(b.min_x for b in boxes)),
        float(min(b.min_y for b in boxes)),
        float(max(b.max_x for b in boxes)),
        float(max(b.max_y for b in boxes)),
    ]


def polygon_area(pts: Sequence[Vec2]) -> Optional[float]:
    """Shoelace area of a simple polygon; None for fewer than 3 points."""
    n = len(pts)
    if n < 3:
        return None
    s = 0.0
    for i in range(n):
        x1, y1 = pts[i].x, pts[i].y
        x2, y2 = pts[(i + 1) % n].x, pts[(i + 1) % n].y
        s += x1 * y2 - x2 * y1
    return safe_float(abs(s) / 2.0)


def polygon_perimeter(pts: Sequence[Vec2]) -> float:
    per = 0.0
    n = len(pts)
    for i in range(n):
        per += pts[i].distance(pts[(i + 1) % n])
    return float(per)


def polygon_centroid_xy(pts: Sequence[Vec2]) -> Optional[List[float]]:
    """
    Centroid of a simple polygon (shoelace-based).
    Returns None if area is ~0.
    """
    n = len(pts)
    a2 = 0.0  # 2*area signed
    cx = 0.0
    cy = 0.0
    for i in range(n):
        x1, y1 = pts[i].x, pts[i].y
        x2, y2 = pts[(i + 1) % n].x, pts[(i + 1) % n].y
        cross = x1 * y2 - x2 * y1
        a2 += cross
        cx += (x1 + x2) * cross
        cy += (y1 + y2) * cross

    if abs(a2) < 1e-12:
        return None
    return [float(cx / (3.0 * a2)), float(cy / (3.0 * a2))]


def extract_text_entity(e: Text) -> Optional[Dict[str, Any]]:
    content = clean_text(e.text or "")
    if not content:
        return None
    return {
        "handle": e.handle,
        "dxftype": e.dxftype,
        "layer": e.layer,
        "text": content,
        "position": point_to_list(e.position),
        "height": safe_float(e.height),
        "rotation": safe_float(e.rotation),
    }


def _boundary_candidate(e: Entity) -> Optional[Dict[str, Any]]:
    base = {
        "handle": e.handle,
        "dxftype": e.dxftype,
        "layer": e.layer,
        "color": e.color,
        "bbox": bbox_for_entities([e]),
    }
    if isinstance(e, Polyline):
        if not e.closed:
            return None
        pts = e.vertices
        return {
            **base,
            "is_closed": True,
            "vertex_count": len(pts),
            "area": polygon_area(pts),
            "perimeter": polygon_perimeter(pts) if len(pts) >= 2 else None,
            "centroid_xy": polygon_centroid_xy(pts) if len(pts) >= 3 else None,
        }
    if isinstance(e, Hatch):
        # area of the outer (first) boundary path
        outer = e.boundary_paths[0] if e.boundary_paths else []
        return {**base, "area": polygon_area(outer), "path_count": len(e.boundary_paths)}
    return None


def _bump(d: Dict[str, int], k: str, inc: int = 1) -> None:
    d[k] = int(d.get(k, 0)) + inc


def _by_count(counts: Dict[str, int]) -> Dict[str, int]:
    return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))


# Main summary functions

def summarize_drawing(
    drawing: Drawing,
    source: Optional[Union[str, Path]] = None,
    *,
    max_text_items: int = 5000,
    max_boundary_candidates: int = 5000,
) -> Dict[str, Any]:
    """
    Structured, JSON-friendly summary of a drawing.

    Extracts layers, entity counts, text content, and boundary candidates
    (closed polylines and hatches).
    """
    entity_counts_by_type: Dict[str, int] = {}
    entity_counts_by_layer: Dict[str, Dict[str, int]] = {}
    inserts_by_block: Dict[str, int] = {}
    text_items: List[Dict[str, Any]] = []
    boundary_candidates: List[Dict[str, Any]] = []

    for e in drawing.entities:
        t = e.dxftype
        _bump(entity_counts_by_type, t)
        _bump(entity_counts_by_layer.setdefault(e.layer or "0", {}), t)

        if isinstance(e, Insert):
            _bump(inserts_by_block, e.block_name)

        if isinstance(e, Text) and len(text_items) < max_text_items:
            item = extract_text_entity(e)
            if item:
                text_items.append(item)

        if len(boundary_candidates) < max_boundary_candidates:
            candidate = _boundary_candidate(e)
            if candidate:
                boundary_candidates.append(candidate)

    # layer list with counts; declared layers without entities are listed too
    layers_out: List[Dict[str, Any]] = []
    names = set(drawing.layers) | set(entity_counts_by_layer)
    for lname in sorted(names, key=str.lower):
        layer = drawing.layer(lname)
        counts = entity_counts_by_layer.get(lname, {})
        layers_out.append({
            "name": lname,
            "color": layer.color,
            "linetype": layer.linetype,
            "is_off": layer.off,
            "is_frozen": layer.frozen,
            "is_locked": layer.locked,
            "entity_counts": _by_count(counts),
            "total_entities": int(sum(counts.values())),
        })

    blocks_out: List[Dict[str, Any]] = []
    for bname in sorted(set(drawing.blocks) | set(inserts_by_block), key=str.lower):
        block = drawing.get_block(bname)
        blocks_out.append({
            "name": bname,
            "base_point": point_to_list(block.base_point) if block else None,
            "definition_entity_count": len(block.entities) if block else None,
            "insert_count": int(inserts_by_block.get(bname, 0)),
        })

    return {
        "meta": {
            "source_file": str(source) if source is not None else None,
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
        },
        "drawing": {
            "bbox_xy": bbox_for_entities(drawing.entities),  # [xmin, ymin, xmax, ymax]
            "entity_counts_by_type": _by_count(entity_counts_by_type),
            "total_entities": int(sum(entity_counts_by_type.values())),
            "layer_count": len(layers_out),
            "block_count": len(drawing.blocks),
        },
        "layers": layers_out,
        "blocks": blocks_out,
        "text_index": {
            "count": int(len(text_items)),
            "truncated": bool(len(text_items) >= max_text_items),
            "items": text_items,
        },
        "boundary_candidates": {
            "count": int(len(boundary_candidates)),
            "truncated": bool(len(boundary_candidates) >= max_boundary_candidates),
            "items": boundary_candidates,
        },
    }


def write_summary_json(
    drawing: Drawing,
    out_path: Union[str, Path],
    source: Optional[Union[str, Path]] = None,
) -> Path:
    summary = summarize_drawing(drawing, source)
    outp = Path(out_path)
    outp.parent.mkdir(parents=True, exist_ok=True)
    outp.write_text(json.dumps(summary, ensure_ascii=False, indent=2), encoding="utf-8")
    return outp
