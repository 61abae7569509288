"""Localized UI strings."""

DEFAULT_LOCALE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "untitled": "Untitled",
        "label_date": "Date",
        "label_author": "Author",
        "label_album": "Album",
        "label_duration": "Duration",
        "label_region": "Region",
        "label_genres": "Genres",
        "minutes_unit": " min",
        "poster_alt": "Poster image",
        "poster_error_icon": "📷",
        "poster_error": "Image failed to load",
        "no_poster": "No image",
        "images_header": "IMAGES",
        "no_images": "No images found",
        "image_error": "Image failed to load",
        "image_view_alt": "Image",
        "image_view_error": "Failed to load image",
        "close": "×",
        "close_label": "Close",
        "html_header": "HTML",
        "html_empty": "Empty HTML content",
        "html_failed": "HTML render failed",
        "media_failed": "Media failed to load",
        "media_timeout": "Media load timed out",
        "card_failed": "Failed to render {type} card",
        "grid_failed": "Image grid render failed",
        "confirm_disable_title": "Disable HTML parsing",
        "confirm_disable_message": (
            "Disabling HTML parsing only takes full effect after a restart.\n\n"
            "Disable it and restart now?"
        ),
    },
    "zh": {
        "untitled": "未命名",
        "label_date": "日期",
        "label_author": "作者",
        "label_album": "专辑",
        "label_duration": "时长",
        "label_region": "地区",
        "label_genres": "类型",
        "minutes_unit": "分钟",
        "poster_alt": "海报图片",
        "poster_error_icon": "📷",
        "poster_error": "图片加载失败",
        "no_poster": "暂无图片",
        "images_header": "IMAGES",
        "no_images": "未找到图片",
        "image_error": "图片加载失败",
        "image_view_alt": "Image",
        "image_view_error": "Failed to load image",
        "close": "×",
        "close_label": "关闭",
        "html_header": "HTML",
        "html_empty": "空的HTML内容",
        "html_failed": "HTML渲染失败",
        "media_failed": "媒体加载失败",
        "media_timeout": "媒体加载超时",
        "card_failed": "渲染{type}卡片失败",
        "grid_failed": "图片网格渲染失败",
        "confirm_disable_title": "确认禁用 HTML 解析",
        "confirm_disable_message": "禁用 HTML 解析功能需要重启插件才能完全生效。\n\n是否确认禁用并立即重启插件？",
    },
}


def get_messages(locale: str | None = None) -> dict[str, str]:
    """Return the message table for ``locale``, falling back to English."""
    return MESSAGES.get(locale or DEFAULT_LOCALE, MESSAGES[DEFAULT_LOCALE])
