"""
API Performance Testing Script
Times the GET endpoints of the tourism CMS API against a running server.

This script:
1. Requests every public GET endpoint twice as an anonymous visitor
   (the second request should be served from the response cache)
2. Optionally signs in and times the dashboard endpoints
3. Checks response status and the X-Cache header
4. Generates a performance report
"""

import requests
import time
import json
from typing import Dict, Optional
from datetime import datetime
import sys

# Configuration
BASE_URL = "http://127.0.0.1:8000/api/v1"

# Leave empty to be prompted; leave the prompt empty to skip dashboard endpoints
USERNAME = ""
PASSWORD = ""

PUBLIC_ENDPOINTS = [
    ("Posts - List", "/posts/", {"page": 1, "limit": 10}),
    ("Posts - Events", "/posts/", {"type": "event", "limit": 10}),
    ("Posts - Popular", "/posts/", {"ordering": "popular", "limit": 10}),
    ("Posts - Upcoming Events", "/events/upcoming/", None),
    ("Posts - Top Attractions", "/attractions/top/", {"limit": 10}),
    ("Regions - List", "/regions/", None),
    ("Videos - List", "/videos/", {"limit": 10}),
    ("Photos - List", "/photos/", {"limit": 10}),
    ("Hotels - List", "/hotels/", {"limit": 10}),
    ("Hotels - Luxury", "/hotels/", {"price_range": "luxury"}),
    ("Hero - Slides", "/hero-slides/", None),
    ("Tags - List", "/tags/", None),
    ("Tags - Count", "/tags/count/", None),
    ("Engagement - Most Liked Posts", "/content/post/top/", {"limit": 5}),
    ("Engagement - Trending Posts", "/views/trending/post/", {"days": 7}),
    ("Search - Global Search", "/search/", {"q": "lake"}),
]

DASHBOARD_ENDPOINTS = [
    ("Dashboard - Stats", "/dashboard/stats/", None),
    ("Dashboard - Top Content", "/dashboard/top-content/", None),
    ("Dashboard - Draft Posts", "/posts/", {"status": "draft"}),
    ("Dashboard - Post Trash", "/posts/trash/", None),
    ("Dashboard - Comment Moderation", "/comments/moderation/", {"status": "pending"}),
    ("Dashboard - Pending Comments", "/comments/moderation/pending-count/", None),
    ("Dashboard - Hero Slides", "/hero-slides/admin/", None),
    ("Dashboard - Notifications", "/notifications/", None),
    ("Dashboard - Audit Logs", "/audit-logs/", None),
    ("Auth - Current User", "/auth/me/", None),
]


class APITester:
    """Class to handle API testing and performance measurement"""

    def __init__(self, base_url: str):
        self.base_url = base_url
        self.results = []
        self.session = requests.Session()
        self.access_token = None

    def authenticate(self, username: str, password: str) -> bool:
        """Authenticate and get access token"""
        try:
            print(f"Authenticating as {username}...")
            response = self.session.post(
                f"{self.base_url}/auth/login/",
                json={"username": username, "password": password},
                timeout=10
            )
            if response.status_code == 200:
                self.access_token = response.json().get('access')
                self.session.headers.update({'Authorization': f'Bearer {self.access_token}'})
                print("Authentication successful")
                return True
            print(f"Authentication failed: {response.status_code}")
            print(f"Response: {response.text}")
            return False
        except requests.RequestException as e:
            print(f"Authentication error: {str(e)}")
            return False

    def test_endpoint(self, name: str, endpoint: str, params: Optional[Dict] = None) -> Dict:
        """Request one endpoint and measure the response time"""
        url = f"{self.base_url}{endpoint}"
        result = {
            'name': name,
            'endpoint': endpoint,
            'url': url,
            'params': params or {},
            'timestamp': datetime.now().isoformat(),
        }

        try:
            start_time = time.time()
            response = self.session.get(url, params=params, timeout=30)
            response_time = (time.time() - start_time) * 1000
        except requests.exceptions.Timeout:
            result.update({'status_code': 0, 'response_time_ms': 30000, 'success': False, 'error': 'Request timeout (30s)'})
            self.results.append(result)
            return result
        except requests.RequestException as e:
            result.update({'status_code': 0, 'response_time_ms': 0, 'success': False, 'error': str(e)})
            self.results.append(result)
            return result

        result.update({
            'status_code': response.status_code,
            'response_time_ms': round(response_time, 2),
            'success': response.status_code == 200,
            'cache': response.headers.get('X-Cache', '-'),
        })

        try:
            data = response.json()
        except ValueError:
            data = None
            result['response_text'] = response.text[:200]

        if isinstance(data, list):
            result['item_count'] = len(data)
        elif isinstance(data, dict) and 'results' in data:
            result['item_count'] = len(data['results'])
            result['total_count'] = data.get('count')

        if not result['success']:
            result['error'] = response.text[:500]

        self.results.append(result)
        return result

    def print_result(self, result: Dict):
        status_icon = "OK  " if result['success'] else "FAIL"
        line = f"{status_icon} {result['name']}: {result['status_code']} in {result['response_time_ms']}ms"
        if result.get('cache') and result['cache'] != '-':
            line += f" (cache {result['cache']})"
        if result.get('item_count') is not None:
            line += f", {result['item_count']} item(s)"
        print(line)
        if not result['success'] and result.get('error'):
            print(f"     Error: {result['error'][:200]}")

    def generate_report(self):
        """Summary of all requests, grouped by category"""
        total_tests = len(self.results)
        successful = [r for r in self.results if r['success']]
        failed_tests = total_tests - len(successful)
        avg_response_time = sum(r['response_time_ms'] for r in successful) / len(successful) if successful else 0

        print("\n" + "=" * 80)
        print("API PERFORMANCE TEST REPORT")
        print("=" * 80)
        print(f"Base URL: {self.base_url}")
        print(f"Test Date: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print(f"\nTotal Requests: {total_tests}")
        print(f"Successful: {len(successful)}")
        print(f"Failed: {failed_tests}")
        if total_tests:
            print(f"Success Rate: {(len(successful) / total_tests * 100):.1f}%")
        print(f"\nAverage Response Time: {avg_response_time:.2f}ms")

        if successful:
            fastest = min(successful, key=lambda r: r['response_time_ms'])
            slowest = max(successful, key=lambda r: r['response_time_ms'])
            print(f"Fastest: {fastest['name']} ({fastest['response_time_ms']}ms)")
            print(f"Slowest: {slowest['name']} ({slowest['response_time_ms']}ms)")

        hits = [r for r in successful if r.get('cache') == 'HIT']
        misses = [r for r in successful if r.get('cache') == 'MISS']
        if hits and misses:
            print(f"\nCache MISS avg: {sum(r['response_time_ms'] for r in misses) / len(misses):.2f}ms")
            print(f"Cache HIT avg:  {sum(r['response_time_ms'] for r in hits) / len(hits):.2f}ms")

        print("\n" + "-" * 80)
        print("RESULTS BY CATEGORY")
        print("-" * 80)
        categories = {}
        for result in self.results:
            category = result['name'].split(' - ')[0] if ' - ' in result['name'] else 'Other'
            categories.setdefault(category, []).append(result)

        for category, results in sorted(categories.items()):
            ok = [r for r in results if r['success']]
            avg_time = sum(r['response_time_ms'] for r in ok) / len(ok) if ok else 0
            print(f"\n{category}: {len(ok)}/{len(results)} successful, avg {avg_time:.2f}ms")
            for result in sorted(results, key=lambda r: r['response_time_ms'], reverse=True):
                print(f"  {'OK  ' if result['success'] else 'FAIL'} {result['endpoint']}: {result['response_time_ms']}ms")

        if failed_tests:
            print("\n" + "-" * 80)
            print("FAILED REQUESTS")
            print("-" * 80)
            for result in self.results:
                if not result['success']:
                    print(f"\n{result['name']}")
                    print(f"  Endpoint: {result['endpoint']}")
                    print(f"  Error: {result.get('error', 'Unknown error')[:200]}")

        print("\n" + "=" * 80)

    def save_results(self, filename: str = "api_test_results.json"):
        with open(filename, 'w') as f:
            json.dump({
                'test_date': datetime.now().isoformat(),
                'base_url': self.base_url,
                'total_tests': len(self.results),
                'successful_tests': sum(1 for r in self.results if r['success']),
                'results': self.results
            }, f, indent=2)
        print(f"\nResults saved to {filename}")


def first_id(tester: APITester, endpoint: str, key: str = 'id') -> Optional[str]:
    """Value of `key` on the first row of a list endpoint, or None"""
    try:
        response = tester.session.get(f"{tester.base_url}{endpoint}", params={"limit": 1}, timeout=10)
    except requests.RequestException:
        return None
    if response.status_code != 200:
        return None
    data = response.json()
    rows = data.get('results', []) if isinstance(data, dict) else data
    return rows[0].get(key) if rows else None


def main():
    print("=" * 80)
    print("API PERFORMANCE TESTING TOOL")
    print("=" * 80)
    print(f"Target: {BASE_URL}\n")

    tester = APITester(BASE_URL)

    print("Public endpoints (cold, then warm)...\n")
    for name, endpoint, params in PUBLIC_ENDPOINTS:
        tester.print_result(tester.test_endpoint(f"{name} [cold]", endpoint, params))
        tester.print_result(tester.test_endpoint(f"{name} [warm]", endpoint, params))

    post_slug = first_id(tester, "/posts/", key='slug')
    if post_slug:
        tester.print_result(tester.test_endpoint("Posts - Detail by Slug", f"/posts/{post_slug}/"))
    post_id = first_id(tester, "/posts/")
    if post_id:
        tester.print_result(tester.test_endpoint("Engagement - Post Comments", f"/comments/post/{post_id}/"))
        tester.print_result(tester.test_endpoint("Engagement - Post View Stats", f"/views/post/{post_id}/"))
        tester.print_result(tester.test_endpoint("Tags - Post Tags", f"/content/post/{post_id}/tags/"))
        tester.print_result(tester.test_endpoint("Links - Post Links", f"/content-links/post/{post_id}/"))
    photo_id = first_id(tester, "/photos/")
    if photo_id:
        tester.print_result(tester.test_endpoint("Photos - Images", f"/photos/{photo_id}/images/"))

    username = USERNAME or input("\nUsername for dashboard endpoints (empty to skip): ").strip()
    if username:
        password = PASSWORD
        if not password:
            import getpass
            password = getpass.getpass("Password: ")
        if tester.authenticate(username, password):
            print("\nDashboard endpoints...\n")
            for name, endpoint, params in DASHBOARD_ENDPOINTS:
                tester.print_result(tester.test_endpoint(name, endpoint, params))
        else:
            print("Skipping dashboard endpoints")

    tester.generate_report()
    tester.save_results("api_test_results.json")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nTests interrupted by user")
        sys.exit(0)
