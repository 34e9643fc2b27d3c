import sys
from collections import Counter

from core.loader import fetch_playlist_from_url

URL = sys.argv[1] if len(sys.argv) > 1 else "https://iptv-org.github.io/iptv/categories/news.m3u"
pl = fetch_playlist_from_url(URL)

print("NAME:", pl.name)
print("URL:", pl.url)
print("CHANNELS:", len(pl.channels))

print("\n--- GROUPS ---")
for group, n in Counter(c.group for c in pl.channels).most_common(15):
    print(f"{n:5d}  {group}")

print("\n--- FIRST 10 CHANNELS ---")
for i, c in enumerate(pl.channels[:10]):
    print(f"{i:02d}:", c.name, "|", c.tvg_id or "-", "|", c.url)
