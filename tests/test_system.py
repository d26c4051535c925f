import unittest
import sys

from tests.base import ApiTestCase


class TestCarMarketplaceSystem(ApiTestCase):

    def test_1_health_check(self):
        """Test health check endpoint"""
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['status'], 'healthy')
        self.assertEqual(data['database'], 'connected')
        print("✅ Health check passed")

    def test_2_root(self):
        """Test root endpoint"""
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn('version', response.json())
        print("✅ Root endpoint passed")

    def test_3_unknown_route(self):
        """Unknown routes answer with the JSON error shape"""
        response = self.client.get("/api/nowhere")
        self.assertEqual(response.status_code, 404)
        data = response.json()
        self.assertFalse(data['success'])
        self.assertIn('message', data)
        print("✅ Unknown route passed")

    def test_4_malformed_id(self):
        """Path parameters that fail validation are reported as 400"""
        response = self.client.get("/api/cars/not-a-number")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error_type'], 'validation_error')
        print("✅ Malformed id passed")


def run_tests():
    """Run all tests and return results"""
    loader = unittest.TestLoader()
    suite = loader.loadTestsFromTestCase(TestCarMarketplaceSystem)
    runner = unittest.TextTestRunner(verbosity=2, stream=sys.stdout)
    result = runner.run(suite)
    return result.wasSuccessful()


if __name__ == '__main__':
    success = run_tests()
    sys.exit(0 if success else 1)
