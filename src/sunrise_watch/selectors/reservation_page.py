"""Selectors for the Sunrise Seto / Izumo reservation form page."""
from __future__ import annotations


class ReservationSelectors:
    facility_radio_template = 'input[type="radio"][name="facilitySelect"][value="{value}"]'
    row_ancestor = "xpath=ancestor::tr[1]"
    following_icon = "xpath=following::img[@alt][1]"
    row = "tr"
    row_icons = "td img"
    body = "body"
    # Tried in order when narrowing the page to a single train's section.
    train_scope_tags = ("form", "section", "article", "div", "table", "tbody")

    @staticmethod
    def facility_radio(form_value: str) -> str:
        escaped = form_value.replace("\\", "\\\\").replace('"', '\\"')
        return ReservationSelectors.facility_radio_template.format(value=escaped)

    @staticmethod
    def train_scope(tag: str, label: str) -> str:
        escaped = label.replace('"', '\\"')
        return f'{tag}:has-text("{escaped}")'


# Icon labels in DOM order: alt, then aria-label, then title.
ICON_LABELS_SCRIPT = """
images => images
  .map(image => {
    const alt = (image.getAttribute('alt') || '').trim();
    const aria = (image.getAttribute('aria-label') || '').trim();
    const title = (image.getAttribute('title') || '').trim();
    return alt || aria || title || '';
  })
  .filter(value => Boolean(value))
"""

# Labels carried by non-image elements (badges, spans with aria-label, ...).
ATTRIBUTE_LABELS_SCRIPT = """
node => {
  const texts = new Set();
  node.querySelectorAll('[alt],[aria-label],[title]').forEach(element => {
    if (element.tagName === 'IMG') {
      return;
    }
    const value =
      element.getAttribute('alt') ||
      element.getAttribute('aria-label') ||
      element.getAttribute('title');
    const trimmed = value ? value.trim() : '';
    if (trimmed) {
      texts.add(trimmed);
    }
  });
  return Array.from(texts);
}
"""
