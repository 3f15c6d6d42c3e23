"""
Selector tables for the list and detail pages.

Each field maps to an ordered list of CSS selectors. The page scripts try
them in order and the first candidate that yields a non-empty value wins,
so a renamed class only needs a new entry here.
"""
from typing import Dict, List


# Search-results page
LIST_SELECTORS: Dict[str, List[str]] = {
    "container": [
        ".item",
        "section.vue-list-rent-item",
        ".list-item",
        "[data-bind] .rent-item",
    ],
    "title": [
        ".item-info-title a",
        ".item-title a",
        "a.link.v-middle",
        ".item-title",
        "h3 a",
    ],
    "link": [
        ".item-info-title a[href]",
        "a.link.v-middle[href]",
        ".item-title a[href]",
        "a[href*='rent.591.com.tw/']",
        "a[href]",
    ],
    "price": [
        ".item-info-price strong",
        ".item-price-text span",
        ".item-info-price",
        ".item-price",
        ".price",
    ],
    "info": [
        ".item-info-txt",
        ".item-msg",
        ".item-style li",
        ".item-area",
    ],
    "tags": [
        ".item-info-tag span",
        ".item-tags span",
        ".item-tag span",
        ".tag",
    ],
    "image": [
        ".item-img img",
        ".image-list img",
        "img",
    ],
}

# Attributes checked for an image URL, lazy-load attributes first
IMAGE_ATTRIBUTES: List[str] = ["data-src", "data-original", "src"]

# Detail page
DETAIL_SELECTORS: Dict[str, List[str]] = {
    "ready": [
        "h1",
        ".house-title",
        ".main-info",
    ],
    "reveal_phone": [
        "button:has-text('顯示電話')",
        "button:has-text('查看電話')",
        "text=顯示號碼",
        ".phone-hide",
        ".contact-phone button",
        "[class*='phone'] button",
    ],
    "phone": [
        ".phone-num",
        ".contact-phone .num",
        ".tel-num",
        "[class*='phone'] span",
        "a[href^='tel:']",
        ".tel",
    ],
    "line": [
        ".line-id",
        ".contact-line span",
        "[class*='line'] .id",
        "a[href*='line.me']",
    ],
    "name": [
        ".contact-name",
        ".linkman .name",
        ".landlord-name",
        "[class*='contact'] .name",
        ".name",
    ],
    "title": [
        "h1",
        ".house-title",
        ".title",
    ],
    "address": [
        "div.address span.load-map",
        ".address .load-map",
        ".house-address",
        ".address",
    ],
    "equipment": [
        ".service-list-item",
        ".facility span",
        ".icon-item",
        ".service-list .text",
    ],
    "description": [
        ".house-intro",
        ".description",
        ".info-content",
        ".house-condition-content",
    ],
    "subway_distance": [
        ".traffic-info",
        ".metro-info",
        ".subway-distance",
        ".surround-list .traffic",
    ],
}


# Walks every listing card and returns raw text fragments per card.
# Runs in the page; ``sel`` is LIST_SELECTORS plus the image attributes.
LIST_EXTRACT_JS = r"""
(sel) => {
  const text = (el) => ((el && el.textContent) || '').trim();
  const firstMatch = (root, candidates, accept) => {
    for (const s of candidates) {
      try {
        for (const el of root.querySelectorAll(s)) {
          if (accept(el)) return el;
        }
      } catch (e) {}
    }
    return null;
  };
  const allMatches = (root, candidates) => {
    for (const s of candidates) {
      try {
        const els = Array.from(root.querySelectorAll(s)).filter((el) => text(el));
        if (els.length) return els;
      } catch (e) {}
    }
    return [];
  };

  let items = [];
  for (const s of sel.container) {
    try {
      items = Array.from(document.querySelectorAll(s));
    } catch (e) {
      items = [];
    }
    if (items.length) break;
  }

  return items.map((item) => {
    try {
      const titleEl = firstMatch(item, sel.title, (el) => text(el).length > 0);
      const linkEl = firstMatch(item, sel.link, (el) => !!el.getAttribute('href'));
      const priceEl = firstMatch(item, sel.price, (el) => /\d/.test(text(el)));
      const images = [];
      for (const s of sel.image) {
        let imgs = [];
        try {
          imgs = Array.from(item.querySelectorAll(s));
        } catch (e) {}
        for (const img of imgs) {
          for (const attr of sel.imageAttributes) {
            const v = img.getAttribute(attr);
            if (v) { images.push(v); break; }
          }
        }
        if (images.length) break;
      }
      return {
        title: text(titleEl),
        href: linkEl ? (linkEl.href || linkEl.getAttribute('href') || '') : '',
        price_text: text(priceEl),
        info: allMatches(item, sel.info).map(text),
        tags: allMatches(item, sel.tags).map(text),
        images: images,
      };
    } catch (e) {
      return null;
    }
  });
}
"""

# Gathers raw contact fragments from a detail page.
DETAIL_EXTRACT_JS = r"""
(sel) => {
  const text = (el) => ((el && el.textContent) || '').trim();
  const collect = (candidates) => {
    const out = [];
    for (const s of candidates) {
      try {
        for (const el of document.querySelectorAll(s)) {
          const href = el.getAttribute('href') || '';
          if (href.startsWith('tel:')) out.push(href.slice(4));
          else if (href.includes('line.me/')) out.push(href);
          const t = text(el);
          if (t) out.push(t);
        }
      } catch (e) {}
    }
    return out;
  };
  const first = (candidates) => {
    for (const s of candidates) {
      try {
        const t = text(document.querySelector(s));
        if (t) return t;
      } catch (e) {}
    }
    return '';
  };
  return {
    phones: collect(sel.phone),
    lines: collect(sel.line),
    names: collect(sel.name),
    title: first(sel.title),
    address: first(sel.address),
    body: ((document.body && document.body.innerText) || '').slice(0, 20000),
  };
}
"""

# Gathers amenity chips, the owner's description and transit distance.
DETAIL_INFO_JS = r"""
(sel) => {
  const text = (el) => ((el && el.textContent) || '').trim();
  const equipment = [];
  for (const s of sel.equipment) {
    try {
      for (const el of document.querySelectorAll(s)) {
        const t = text(el);
        if (t) equipment.push(t);
      }
    } catch (e) {}
    if (equipment.length) break;
  }
  const first = (candidates) => {
    for (const s of candidates) {
      try {
        const t = text(document.querySelector(s));
        if (t) return t;
      } catch (e) {}
    }
    return '';
  };
  return {
    equipment: equipment,
    description: first(sel.description),
    subway_distance: first(sel.subway_distance),
  };
}
"""

# Scrolls in fixed steps until the bottom, a distance cap or an iteration cap.
AUTO_SCROLL_JS = r"""
async ({ step, maxDistance, maxIterations, interval }) => {
  await new Promise((resolve) => {
    let total = 0;
    let iterations = 0;
    const timer = setInterval(() => {
      const scrollHeight = document.body.scrollHeight;
      window.scrollBy(0, step);
      total += step;
      iterations += 1;
      if (total >= scrollHeight - window.innerHeight || total >= maxDistance || iterations >= maxIterations) {
        clearInterval(timer);
        resolve();
      }
    }, interval);
  });
  return true;
}
"""


def list_selector_args() -> dict:
    """Argument passed to LIST_EXTRACT_JS."""
    args = {k: list(v) for k, v in LIST_SELECTORS.items()}
    args["imageAttributes"] = list(IMAGE_ATTRIBUTES)
    return args


def detail_selector_args() -> dict:
    """Argument passed to DETAIL_EXTRACT_JS."""
    return {k: list(v) for k, v in DETAIL_SELECTORS.items()}
