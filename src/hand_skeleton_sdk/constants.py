JOINT_COUNT = 25

# Index order is frozen. New joints may only be appended.
JOINT_NAMES: tuple[str, ...] = (
    "wrist",
    "thumb-metacarpal",
    "thumb-phalanx-proximal",
    "thumb-phalanx-distal",
    "thumb-phalanx-tip",
    "index-metacarpal",
    "index-phalanx-proximal",
    "index-phalanx-intermediate",
    "index-phalanx-distal",
    "index-phalanx-tip",
    "middle-metacarpal",
    "middle-phalanx-proximal",
    "middle-phalanx-intermediate",
    "middle-phalanx-distal",
    "middle-phalanx-tip",
    "ring-metacarpal",
    "ring-phalanx-proximal",
    "ring-phalanx-intermediate",
    "ring-phalanx-distal",
    "ring-phalanx-tip",
    "little-metacarpal",
    "little-phalanx-proximal",
    "little-phalanx-intermediate",
    "little-phalanx-distal",
    "little-phalanx-tip",
)

HTS_WRIST_VALUE_COUNT = 7
HTS_LANDMARK_COUNT = 21
HTS_LANDMARK_VALUE_COUNT = HTS_LANDMARK_COUNT * 3
