"""
Prompts and tool schema for the Claude-backed pattern services.

ANALYSIS_TOOL_SCHEMA defines the single tool used for garment analysis.
tool_choice={"type": "any"} in the API call forces Claude to call it,
guaranteeing JSON output rather than free-text prose.

Code generation and fixing return plain text; the code is extracted from a
fenced block when the model wraps it in one.
"""

from __future__ import annotations

import json
from typing import Any

PATTERN_LIBRARY_GUIDE = """FreeSewing Pattern Creation Guide:

1. Basic Structure:
A FreeSewing pattern consists of:
- Design object with name, parts array, measurements, and options
- Part objects with name and draft function
- Draft functions receive { points, paths, measurements, options, part } and return part

2. Key Concepts:
- Points: Define locations using new Point(x, y)
- Paths: Connect points using .move(), .line(), .curve(), .close()
- Measurements: User body measurements in millimeters
- Options: Configurable values like ease percentages

3. Example Pattern:
```javascript
import { Design, Point, Path } from '@freesewing/core';

const front = {
  name: 'front',
  draft: ({ points, paths, measurements, options, part }) => {
    const bustWithEase = measurements.bust * (1 + options.ease);

    points.topLeft = new Point(0, 0);
    points.topRight = new Point(bustWithEase / 4, 0);
    points.bottomRight = new Point(bustWithEase / 4, measurements.torsoLength);
    points.bottomLeft = new Point(0, measurements.torsoLength);

    paths.seam = new Path()
      .move(points.topLeft)
      .line(points.topRight)
      .line(points.bottomRight)
      .line(points.bottomLeft)
      .close()
      .attr('class', 'fabric');

    return part;
  }
};

const design = new Design({
  name: 'MyGarment',
  parts: [front],
  measurements: ['bust', 'waist', 'hips'],
  options: {
    ease: { pct: 8, min: 0, max: 20 }
  }
});

export default design;
```

4. Important Conventions:
- Measurements arrive in mm (the caller converts from cm)
- Ease is typically a percentage (0.05 = 5%)
- Seam allowance is added separately via options
- Use curves for natural body shapes
- Add grain lines, notches, and labels
"""

PATTERNMAKING_FUNDAMENTALS = """Patternmaking Fundamentals:

1. Ease Values by Garment Type:
- Fitted: 2-5% ease
- Semi-fitted: 5-10% ease
- Loose: 10-15% ease
- Oversized: 15-25% ease

2. Standard Seam Allowances:
- Regular seams: 1.5cm
- French seams: 1cm
- Hems: 2-5cm depending on style
- Armholes/necklines: 0.6-1cm

3. Pattern Pieces by Garment:
- Basic bodice: Front, Back, Sleeve (optional)
- Dress: Bodice front, Bodice back, Skirt front, Skirt back, Sleeves
- Pants: Front, Back, Waistband, Pocket (optional)
- Skirt: Front, Back, Waistband

4. Key Measurements:
- Bust: Fullest part of bust
- Waist: Natural waistline
- Hips: Fullest part of hips (usually 20cm below waist)
- Shoulder: Shoulder point to shoulder point
- Arm length: Shoulder to wrist

5. Dart Placement:
- Bust darts: Point toward apex, stop 2.5cm before
- Waist darts: Center on front/back panels
- Dart width: Typically 2-4cm

6. Grain Line:
- Usually parallel to center front/back
- For sleeves: parallel to center of sleeve
"""

ANALYSIS_SYSTEM_PROMPT = """You are an expert patternmaker analyzing garment
photographs so that a sewing pattern can be drafted from them.  Describe only
what is visible; when a detail is hidden, choose the most common construction
for that garment type.  Always answer by calling the describe_garment tool."""

ANALYSIS_TOOL_SCHEMA: dict = {
    "name": "describe_garment",
    "description": "Return the structural description of the garment in the image.",
    "input_schema": {
        "type": "object",
        "properties": {
            "garmentType": {
                "type": "string",
                "enum": ["dress", "top", "bottom", "outerwear", "jumpsuit", "other"],
            },
            "silhouette": {
                "type": "string",
                "enum": ["fitted", "semi-fitted", "loose", "oversized"],
            },
            "length": {
                "type": "string",
                "description": "Length description, e.g. 'knee', 'midi', 'cropped'.",
            },
            "sleeves": {
                "type": "object",
                "properties": {
                    "type": {
                        "type": "string",
                        "enum": ["none", "cap", "short", "elbow", "three-quarter", "long"],
                    },
                    "fit": {"type": "string", "enum": ["fitted", "loose", "puff", "bell"]},
                },
                "required": ["type", "fit"],
            },
            "neckline": {"type": "string"},
            "closure": {"type": "string"},
            "seaming": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Seam types such as 'princess', 'side', 'center-back'.",
            },
            "details": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Details such as 'pockets', 'pleats', 'gathers'.",
            },
            "suggestedFabric": {"type": "string", "enum": ["woven", "knit", "stretch-woven"]},
            "estimatedEase": {
                "type": "object",
                "properties": {
                    "bust": {"type": "number", "minimum": 0.0, "maximum": 0.25},
                    "waist": {"type": "number", "minimum": 0.0, "maximum": 0.25},
                    "hip": {"type": "number", "minimum": 0.0, "maximum": 0.25},
                },
                "required": ["bust", "waist", "hip"],
            },
        },
        "required": [
            "garmentType",
            "silhouette",
            "length",
            "sleeves",
            "neckline",
            "closure",
            "seaming",
            "details",
            "suggestedFabric",
            "estimatedEase",
        ],
    },
}


def analysis_prompt(description: str) -> str:
    return (
        "Analyze this garment image for pattern creation.\n\n"
        f"User description: {description}\n\n"
        "Be precise and accurate."
    )


def code_generation_prompt(
    analysis: dict[str, Any],
    measurements: dict[str, float],
    fabric_type: str,
    seam_allowance: float,
) -> str:
    return f"""You are an expert patternmaker. Generate FreeSewing pattern code for the following garment.

{PATTERN_LIBRARY_GUIDE}

{PATTERNMAKING_FUNDAMENTALS}

GARMENT ANALYSIS:
{json.dumps(analysis, indent=2)}

USER MEASUREMENTS (in cm; the engine receives them in mm under the same names):
{json.dumps(measurements, indent=2)}

FABRIC TYPE: {fabric_type}
SEAM ALLOWANCE: {seam_allowance:g}cm

Generate complete, valid JavaScript code for a FreeSewing pattern.

Requirements:
1. Include ALL necessary pattern pieces
2. Read measurements from the measurements object (already in mm)
3. Apply appropriate ease based on the silhouette
4. Ensure connecting seam lengths match
5. Add seam allowance, grain lines, and notches
6. Bind the design to a variable named design and export it as the default export

Output ONLY the JavaScript code, no explanation. Start with imports and end with the export.
The code must be complete and executable.

IMPORTANT: Use only @freesewing/core imports. Available: Design, Point, Path, Snippet."""


def fix_code_prompt(code: str, error: str) -> str:
    return f"""The following FreeSewing pattern code has an error. Fix it.

CURRENT CODE:
```javascript
{code}
```

ERROR:
{error}

{PATTERN_LIBRARY_GUIDE}

Fix the code and output ONLY the corrected JavaScript code.
Do not include any explanation, just the code.
Make sure all imports are correct and the code is complete."""


def instructions_prompt(analysis: dict[str, Any], piece_names: list[str]) -> str:
    return f"""Generate clear sewing instructions for the following garment.

GARMENT ANALYSIS:
{json.dumps(analysis, indent=2)}

PATTERN PIECES:
{", ".join(piece_names)}

Write step-by-step sewing instructions that are:
1. Clear and beginner-friendly
2. In logical construction order
3. Include tips for each step
4. Mention seam allowances and finishing techniques

Format as numbered steps with clear headings."""


IMAGE_STYLE_TEMPLATES: dict[str, str] = {
    "realistic": "{prompt}",
    "sketch": (
        "Fashion sketch illustration: {prompt}. Hand-drawn style, pencil sketch look, "
        "fashion croquis proportions."
    ),
    "technical": (
        "Technical flat sketch: {prompt}. Flat lay technical drawing, showing construction "
        "details, seams, and closures clearly. Black and white."
    ),
}

IMAGE_PROMPT_WRAPPER = (
    "Fashion design illustration: {prompt}. Clean, professional garment design visualization "
    "on a simple background. Focus on the garment construction details, seams, and silhouette. "
    "Technical fashion illustration style."
)
