import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from wikirefs.core.rewrite import replace_single_link, rewrite


def test_rewrite_simple():
    assert rewrite("[TestPage]", "TestPage", "FooTest") == "[FooTest]"


def test_rewrite_anchor_kept():
    assert rewrite("[TestPage#heading1]", "TestPage", "FooTest") == "[FooTest#heading1]"


def test_rewrite_display_text_follows_target():
    src = "[Link to TestPage2|TestPage2]"
    assert rewrite(src, "TestPage2", "Test") == "[Link to Test|Test]"


def test_rewrite_extended_link_keeps_attributes():
    src = "[Link to TestPage2|TestPage2|target='_new']"
    assert rewrite(src, "TestPage2", "Test") == "[Link to Test|Test|target='_new']"


def test_rewrite_escaped_links_untouched():
    src = "[[Link to TestPage2|TestPage2|target='_new']"
    assert rewrite(src, "TestPage2", "Test") == src

    src = "~[Link to TestPage2|TestPage2|target='_new']"
    assert rewrite(src, "TestPage2", "Test") == src


def test_rewrite_empty_target_untouched():
    assert rewrite("[TestPage|]", "TestPage", "FooTest") == "[TestPage|]"


def test_rewrite_empty_display():
    assert rewrite("[|TestPage]", "TestPage", "FooTest") == "[|FooTest]"


def test_rewrite_multilink_with_camel_case():
    src = (
        "[TestPage] [TestPage] [linktext|TestPage] TestPage [linktext|TestPage] "
        "[TestPage#Anchor] [TestPage] TestPage [TestPage]"
    )
    dst = (
        "[FooTest] [FooTest] [linktext|FooTest] FooTest [linktext|FooTest] "
        "[FooTest#Anchor] [FooTest] FooTest [FooTest]"
    )
    assert rewrite(src, "TestPage", "FooTest", camel_case=True) == dst


def test_rewrite_camel_case_off_leaves_bare_words():
    assert rewrite("TestPage [TestPage]", "TestPage", "FooTest") == "TestPage [FooTest]"


def test_rewrite_camel_case_whole_words_only():
    src = "TestPages TestPageX xTestPage TestPage"
    assert rewrite(src, "TestPage", "FooTest", camel_case=True) == "TestPages TestPageX xTestPage FooTest"


def test_rewrite_camel_case_any_script():
    src = "ÄpfelBaum [ÄpfelBaum] ÄpfelBaumX"
    dst = "BirnenBaum [BirnenBaum] ÄpfelBaumX"
    assert rewrite(src, "ÄpfelBaum", "BirnenBaum", camel_case=True) == dst


def test_rewrite_non_wiki_name():
    src = "[Test] [Test#anchor] test Test [test] [link|test] [link|test]"
    dst = "[TestPage] [TestPage#anchor] test Test [TestPage] [link|TestPage] [link|TestPage]"
    assert rewrite(src, "Test", "TestPage", camel_case=True) == dst


def test_rewrite_attachments_case_sensitive():
    src = (
        "[Cdauth/attach.txt] [link|Cdauth/attach.txt] [cdauth|Cdauth/attach.txt]"
        "[CDauth/attach.txt] [link|CDauth/attach.txt] [cdauth|CDauth/attach.txt]"
        "[cdauth/attach.txt] [link|cdauth/attach.txt] [cdauth|cdauth/attach.txt]"
    )
    dst = (
        "[CdauthNew/attach.txt] [link|CdauthNew/attach.txt] [cdauth|CdauthNew/attach.txt]"
        "[CDauth/attach.txt] [link|CDauth/attach.txt] [cdauth|CDauth/attach.txt]"
        "[CdauthNew/attach.txt] [link|CdauthNew/attach.txt] [cdauth|CdauthNew/attach.txt]"
    )
    assert rewrite(src, "Cdauth", "CdauthNew") == dst


def test_rewrite_attachment_with_anchor():
    src = "[Page/file.txt#x] [link|Page#sec/sub]"
    assert rewrite(src, "Page", "New") == "[New/file.txt#x] [link|New#sec/sub]"


def test_rewrite_blanks_keep_link_text():
    assert rewrite("[Test Page Referred]", "TestPageReferred", "TestPageReferredNew") == (
        "[Test Page Referred|TestPageReferredNew]"
    )
    assert rewrite("[link one] [link two]", "Link one", "Link uno") == "[link one|Link uno] [link two]"


def test_rewrite_skips_preformatted_and_plugins():
    src = "{{{ [TestPage] }}} [{InsertPage page='TestPage'}] [TestPage]"
    assert rewrite(src, "TestPage", "FooTest") == "{{{ [TestPage] }}} [{InsertPage page='TestPage'}] [FooTest]"


def test_rewrite_other_links_untouched():
    src = "[TestPage2] [http://example.com/TestPage] [Wiki:TestPage]"
    assert rewrite(src, "TestPage", "FooTest") == src


def test_rewrite_identity():
    assert rewrite("[A]", "A", "A") == "[A]"
    assert rewrite("", "A", "B") == ""


def test_replace_single_link():
    assert replace_single_link("TestPage/foo.txt", "TestPage", "FooTest") == ("FooTest/foo.txt", True)
    assert replace_single_link("Other", "TestPage", "FooTest") == ("Other", False)
    assert replace_single_link("http://x", "http://x", "FooTest") == ("http://x", False)
