"""Binary format constants for assets.bin and srmodels.bin."""

from __future__ import annotations

# Shared --------------------------------------------------------------------
NAME_FIELD_SIZE = 32
U32_SIZE = 4
U16_SIZE = 2

# assets.bin ----------------------------------------------------------------
ASSET_HEADER_SIZE = 3 * U32_SIZE  # file_count + checksum + combined_length
ASSET_RECORD_SIZE = NAME_FIELD_SIZE + 2 * U32_SIZE + 2 * U16_SIZE  # 44
PAYLOAD_MARKER = b"\x5a\x5a"
CHECKSUM_MASK = 0xFFFF

# Headers of the split image formats carry width/height at these offsets.
SPLIT_IMAGE_EXTENSIONS = frozenset({"sjpg", "spng", "sqoi"})
SPLIT_IMAGE_WIDTH_OFFSET = 14
SPLIT_IMAGE_HEIGHT_OFFSET = 16

RASTER_IMAGE_EXTENSIONS = frozenset(
    {"png", "jpg", "jpeg", "gif", "bmp", "webp"}
)

# srmodels.bin --------------------------------------------------------------
MODEL_COUNT_SIZE = U32_SIZE
MODEL_ENTRY_SIZE = NAME_FIELD_SIZE + U32_SIZE  # name + file_count
MODEL_FILE_ENTRY_SIZE = NAME_FIELD_SIZE + 2 * U32_SIZE  # name + start + len

# Every wakenet model directory in the share carries the same three files.
WAKENET_MODEL_FILES = ("_MODEL_INFO_", "wn9_data", "wn9_index")

WAKENET9_PREFIX = "wn9_"
WAKENET9S_PREFIX = "wn9s_"
# Chips that only run the small WakeNet9s variant.
WAKENET9S_CHIPS = frozenset({"esp32c3", "esp32c6"})

WAKENET9_MODELS = (
    "wn9_alexa",
    "wn9_astrolabe_tts",
    "wn9_bluechip_tts2",
    "wn9_computer_tts",
    "wn9_haixiaowu_tts",
    "wn9_heyily_tts2",
    "wn9_heyprinter_tts",
    "wn9_heywanda_tts",
    "wn9_heywillow_tts",
    "wn9_hiesp",
    "wn9_hifairy_tts2",
    "wn9_hijason_tts2",
    "wn9_hijolly_tts2",
    "wn9_hijoy_tts",
    "wn9_hilexin",
    "wn9_hilili_tts",
    "wn9_himfive",
    "wn9_himiaomiao_tts",
    "wn9_hitelly_tts",
    "wn9_hiwalle_tts2",
    "wn9_hixiaoxing_tts",
    "wn9_jarvis_tts",
    "wn9_linaiban_tts2",
    "wn9_miaomiaotongxue_tts",
    "wn9_mycroft_tts",
    "wn9_nihaobaiying_tts2",
    "wn9_nihaodongdong_tts2",
    "wn9_nihaomiaoban_tts2",
    "wn9_nihaoxiaoan_tts2",
    "wn9_nihaoxiaoxin_tts",
    "wn9_nihaoxiaoyi_tts2",
    "wn9_nihaoxiaozhi",
    "wn9_nihaoxiaozhi_tts",
    "wn9_sophia_tts",
    "wn9_xiaoaitongxue",
    "wn9_xiaobinxiaobin_tts",
    "wn9_xiaojianxiaojian_tts2",
    "wn9_xiaokangtongxue_tts2",
    "wn9_xiaolongxiaolong_tts",
    "wn9_xiaoluxiaolu_tts2",
    "wn9_xiaomeitongxue_tts",
    "wn9_xiaomingtongxue_tts2",
    "wn9_xiaosurou_tts2",
    "wn9_xiaotexiaote_tts2",
    "wn9_xiaoyaxiaoya_tts2",
    "wn9_xiaoyutongxue_tts2",
)

WAKENET9S_MODELS = (
    "wn9s_alexa",
    "wn9s_hiesp",
    "wn9s_hijason",
    "wn9s_hilexin",
    "wn9s_nihaoxiaozhi",
)

DEFAULT_SHARE_URL = "./static/wakenet_model"
DEFAULT_FETCH_TIMEOUT = 30.0
