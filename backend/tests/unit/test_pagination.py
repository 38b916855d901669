from __future__ import annotations

import unittest

from perizie.services.export import paginate, scaled_height


class PaginateTestCase(unittest.TestCase):
    def test_tall_surface_spans_several_pages(self) -> None:
        slices = paginate(930, 210, 210, 297)
        self.assertEqual(len(slices), 4)
        self.assertEqual([s.offset for s in slices], [0.0, -297.0, -594.0, -891.0])
        self.assertEqual([s.index for s in slices], [0, 1, 2, 3])
        for page in slices:
            self.assertEqual(page.image_height, 930)

    def test_exact_multiple_has_no_trailing_blank_page(self) -> None:
        slices = paginate(594, 210, 210, 297)
        self.assertEqual(len(slices), 2)

    def test_short_surface_fits_one_page(self) -> None:
        slices = paginate(10, 210, 210, 297)
        self.assertEqual(len(slices), 1)
        self.assertEqual(slices[0].offset, 0.0)

    def test_surface_is_scaled_to_page_width(self) -> None:
        self.assertEqual(scaled_height(1000, 2000, 297), 148.5)
        slices = paginate(4200, 297, 297, 210)
        self.assertEqual(len(slices), 20)

    def test_rejects_non_positive_dimensions(self) -> None:
        for args in ((0, 210, 210, 297), (100, 0, 210, 297), (100, 210, 210, -1)):
            with self.subTest(args=args):
                with self.assertRaises(ValueError):
                    paginate(*args)


if __name__ == "__main__":
    unittest.main()
